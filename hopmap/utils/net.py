import requests
from requests.adapters import HTTPAdapter
from urllib3 import Retry

from hopmap.utils.definitions import USER_AGENT


def geo_session(user_agent=USER_AGENT, pool_size=10):
    """Session for geolocation lookups. Retries are disabled at the transport level;
    rate limits are retried by the caller and other failures fall through to the next provider."""
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=Retry(total=0))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session
