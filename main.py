import os

import uvicorn
from anisub.main import app

if __name__ == "__main__":
    uvicorn.run("anisub.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
