"""Reading, writing and discovering JSON translation documents."""
import json
import os
import tempfile
from typing import Any, Dict, List

import jsonschema

# A translation document must be a JSON object at the top level.
DOCUMENT_SCHEMA = {"type": "object"}


class LocaleSyncError(Exception):
    """Base class for errors that abort a synchronization run."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class MissingReferenceDocumentError(LocaleSyncError):
    def __init__(self, path: str):
        super().__init__(f"Reference file not found at {path}", path)


class MissingLocaleDocumentError(LocaleSyncError):
    def __init__(self, path: str):
        super().__init__(f"Locale file not found: {os.path.basename(path)}", path)


class MalformedDocumentError(LocaleSyncError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not parse '{path}': {reason}", path)


class UnreadableDocumentError(LocaleSyncError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not read '{path}': {reason}", path)


class PersistFailureError(LocaleSyncError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not write '{path}': {reason}", path)


def load_document(file_path: str) -> Dict[str, Any]:
    """
    Load a JSON translation document.

    Args:
        file_path (str): The path to the document.

    Returns:
        Dict[str, Any]: The parsed document tree.

    Raises:
        UnreadableDocumentError: If the file cannot be opened or read.
        MalformedDocumentError: If the content is not UTF-8 JSON with an object at the top level.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except json.JSONDecodeError as json_exc:
        raise MalformedDocumentError(file_path, str(json_exc)) from json_exc
    except UnicodeDecodeError as decode_exc:
        raise MalformedDocumentError(file_path, f"not a valid UTF-8 file ({decode_exc.reason})") from decode_exc
    except OSError as os_exc:
        raise UnreadableDocumentError(file_path, os_exc.strerror or str(os_exc)) from os_exc

    try:
        jsonschema.validate(instance=document, schema=DOCUMENT_SCHEMA)
    except jsonschema.ValidationError as validation_exc:
        raise MalformedDocumentError(file_path, validation_exc.message) from validation_exc
    return document


def serialize_document(document: Dict[str, Any], indent: int = 2, ensure_ascii: bool = False) -> str:
    """Serialize a document with stable indentation and a trailing newline."""
    return json.dumps(document, indent=indent, ensure_ascii=ensure_ascii) + '\n'


def write_document(file_path: str, document: Dict[str, Any], indent: int = 2, ensure_ascii: bool = False) -> None:
    """
    Rewrite a document in full.

    The content goes to a temporary file in the same directory first and is
    then moved over the target, so a failed write leaves the old file intact.

    Raises:
        PersistFailureError: If the file could not be written.
    """
    content = serialize_document(document, indent=indent, ensure_ascii=ensure_ascii)
    directory = os.path.dirname(os.path.abspath(file_path))
    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
                mode='w', encoding='utf-8', dir=directory, suffix='.tmp', delete=False
        ) as temp_f:
            temp_path = temp_f.name
            temp_f.write(content)
        os.replace(temp_path, file_path)
    except OSError as os_exc:
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)
        raise PersistFailureError(file_path, str(os_exc)) from os_exc


def list_locale_files(locales_directory: str, reference_file_name: str, suffix: str = '.json') -> List[str]:
    """
    List the locale documents in a directory, excluding the reference.

    Returns:
        List[str]: File names sorted alphabetically.
    """
    return sorted(
        name for name in os.listdir(locales_directory)
        if name.endswith(suffix)
        and name != reference_file_name
        and os.path.isfile(os.path.join(locales_directory, name))
    )


def resolve_locale_file(locale: str, suffix: str = '.json') -> str:
    """Map a locale identifier such as ``de`` or ``de.json`` to its file name."""
    return locale if locale.endswith(suffix) else f"{locale}{suffix}"
