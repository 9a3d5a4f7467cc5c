"""
XML Sitemap - Runtime context.
Holds the options of the host site so that core/ and modules/ never read
global configuration on their own.
The API (or a host application) calls init() once at startup.
"""

_options: dict = {}
_MISSING = object()


def init(options: dict = None):
    """Inject the site options (called by api/main.py or the host)."""
    global _options
    _options = dict(options or {})


def get_options() -> dict:
    return _options


def get_option(path: str, default=None):
    """Read an option by dotted path (ex: 'sitemap.include.invisible').

    Flat keys win over nested dicts, so both
    {"sitemap.priority": True} and {"sitemap": {"priority": True}} work.
    """
    if path in _options:
        return _options[path]
    val = _options
    for k in path.split("."):
        val = val.get(k, _MISSING) if isinstance(val, dict) else _MISSING
        if val is _MISSING:
            return default
    return val
