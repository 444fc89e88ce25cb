"""User-visible message catalog.

Messages are keyed by a stable identifier and rendered with ``str.format``
parameters. French is the product's primary language; English is kept in
sync for API clients that ask for it.
"""

from typing import Dict

DEFAULT_LOCALE = "fr"

MESSAGES: Dict[str, Dict[str, str]] = {
    "split_success": {
        "fr": "Fichier découpé avec succès en {count} partie(s)",
        "en": "File split successfully into {count} part(s)",
    },
    "no_file_provided": {
        "fr": "Aucun fichier fourni",
        "en": "No file provided",
    },
    "no_filenames": {
        "fr": "Aucun fichier demandé pour l'archive",
        "en": "No files requested for the archive",
    },
    "unsupported_file_type": {
        "fr": "Seuls les fichiers CSV sont acceptés",
        "en": "Only CSV files are accepted",
    },
    "upload_too_large": {
        "fr": "Le fichier dépasse la taille maximale autorisée ({limit} octets)",
        "en": "The file exceeds the maximum allowed size ({limit} bytes)",
    },
    "row_limit_not_integer": {
        "fr": "Le nombre de lignes par fichier doit être un nombre entier",
        "en": "The number of rows per file must be an integer",
    },
    "row_limit_too_small": {
        "fr": "Le nombre de lignes par fichier doit être supérieur à 0",
        "en": "The number of rows per file must be greater than 0",
    },
    "row_limit_too_large": {
        "fr": "Le nombre de lignes par fichier ne peut pas dépasser {limit}",
        "en": "The number of rows per file cannot exceed {limit}",
    },
    "header_without_data": {
        "fr": "Le fichier doit contenir au minimum un header et une ligne de données",
        "en": "The file must contain at least a header and one data row",
    },
    "no_data_rows": {
        "fr": "Le fichier doit contenir au minimum une ligne de données",
        "en": "The file must contain at least one data row",
    },
    "header_unresolvable": {
        "fr": "Impossible de détecter les colonnes du fichier CSV",
        "en": "Unable to detect the columns of the CSV file",
    },
    "header_duplicate_columns": {
        "fr": "Le header contient des colonnes en double : {columns}",
        "en": "The header contains duplicate columns: {columns}",
    },
    "parse_error": {
        "fr": "Le fichier CSV est mal formé (ligne {line}) : {reason}",
        "en": "The CSV file is malformed (line {line}): {reason}",
    },
    "too_many_fields": {
        "fr": "La ligne {line} contient {found} valeurs alors que {expected} colonnes sont attendues",
        "en": "Line {line} has {found} values but {expected} columns are expected",
    },
    "decode_error": {
        "fr": "Le fichier n'est pas encodé en UTF-8",
        "en": "The file is not UTF-8 encoded",
    },
    "serialization_error": {
        "fr": "Erreur lors de la création du fichier {filename}",
        "en": "Error while writing file {filename}",
    },
    "timeout": {
        "fr": "Temps de traitement dépassé. Fichier trop volumineux.",
        "en": "Processing time exceeded. The file is too large.",
    },
    "invalid_filename": {
        "fr": "Nom de fichier invalide : {filename}",
        "en": "Invalid file name: {filename}",
    },
    "artifact_not_found": {
        "fr": "Fichier introuvable : {filename}",
        "en": "File not found: {filename}",
    },
    "storage_disabled": {
        "fr": "Le stockage des fichiers découpés n'est pas activé sur ce serveur",
        "en": "Split file storage is not enabled on this server",
    },
    "rate_limited": {
        "fr": "Trop de requêtes depuis cette IP, veuillez réessayer plus tard.",
        "en": "Too many requests from this IP, please try again later.",
    },
    "processing_error": {
        "fr": "Erreur lors du traitement du fichier CSV",
        "en": "Error while processing the CSV file",
    },
    "server_error": {
        "fr": "Erreur interne du serveur",
        "en": "Internal server error",
    },
}


def render(key: str, locale: str = DEFAULT_LOCALE, **params) -> str:
    """Render a catalog message, falling back to the default locale."""
    entry = MESSAGES[key]
    template = entry.get(locale) or entry[DEFAULT_LOCALE]
    return template.format(**params)
