import threading

from tree_sitter import Language, Parser
import tree_sitter_java as tsjava

from equimutant.exceptions import ConfigError
from equimutant.logging_config import logger

_LANGUAGE_LOADERS = {
    "java": tsjava.language,
}

# tree-sitter parsers are not safe to share between threads, so the cache is per thread
_local = threading.local()


def get_parser(language_name: str = "java") -> Parser:
    """
    Return a tree-sitter parser for the given language.

    Caches one parser object per thread and language.
    """
    cache = getattr(_local, "parsers", None)
    if cache is None:
        cache = _local.parsers = {}

    if language_name in cache:
        return cache[language_name]

    loader = _LANGUAGE_LOADERS.get(language_name)
    if loader is None:
        raise ConfigError(f"No tree-sitter grammar registered for '{language_name}'")

    parser = Parser()
    parser.language = Language(loader())
    cache[language_name] = parser
    logger.debug(f"Loaded tree-sitter grammar '{language_name}'")
    return parser
