no_cache_headers = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': '*',
    'Cache-Control': 'no-cache, no-store, must-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
    'Surrogate-Control': 'no-store'
}

# Next.js page state: <script id="__NEXT_DATA__" type="application/json">{...}</script>
NEXT_DATA_MARKER = '__NEXT_DATA__'
SCRIPT_END_MARKER = '</script>'
# len('__NEXT_DATA__" type="application/json">')
NEXT_DATA_PREFIX_LENGTH = 39

SEARCH_PATH = '/search'
ANIME_PATH = '/anime/'
WATCH_PATH = '/watch/'

DEGRADED_DETAILS = {
    'description': 'Error loading description',
    'aliases': 'Duration: Unknown',
    'airdate': 'Aired: Unknown',
}
