from equimutant.exceptions import ConfigError

# Mapping of file extensions to language names used in this module
SUPPORTED_LANGUAGES = {
    ".java": "java",
}

# tree-sitter node types that never become SyntaxNodes (they stay in the source text)
SKIPPED_NODE_TYPES = frozenset({
    "line_comment",
    "block_comment",
})


def validate_extension(extension: str) -> str:
    """
    Validate a file extension and return its language.

    Args:
        extension: File extension (e.g., '.java')

    Returns:
        The language name for the extension.

    Raises:
        ConfigError: If the extension is not supported.
    """
    language = SUPPORTED_LANGUAGES.get(extension.lower())
    if language is None:
        supported = ", ".join(SUPPORTED_LANGUAGES.keys())
        raise ConfigError(
            f"File extension '{extension}' is not supported. Supported extensions: {supported}"
        )

    return language
