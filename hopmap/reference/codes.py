# router naming prefixes that collide with an unrelated airport, or name a
# metro area rather than the airport serving it
KNOWN_REPLACEMENTS = {
    "hls": "hel",
    "sto": "arn",
    "kbn": "cph",
    "kan": "mci",
    "pal": "pao",
    "chi": "ord",
}


def normalize_code(token: str) -> str:
    code = token.lower().strip()
    return KNOWN_REPLACEMENTS.get(code, code)
