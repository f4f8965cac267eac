"""
Validazione dei file caricati (documenti e template PDF).
"""

import os

# Estensioni file permesse per upload documenti
ALLOWED_FILE_EXTENSIONS = {
    ".pdf",
    ".jpg", ".jpeg", ".png", ".gif", ".webp",  # Immagini
    ".doc", ".docx",  # Word
    ".xls", ".xlsx",  # Excel
    ".txt", ".csv",
}

# I template di contratto/orcamento devono essere PDF con campi modulo
TEMPLATE_FILE_EXTENSIONS = {".pdf"}

# Dimensione massima file: 10MB
MAX_FILE_SIZE = 10 * 1024 * 1024


def file_extension(name: str) -> str:
    return os.path.splitext(name)[1].lower()


def validate_file_upload(file, allowed_extensions=None, max_size=MAX_FILE_SIZE):
    """
    Valida un file caricato dall'utente.

    Controlla:
    - Estensione file permessa
    - Dimensione file entro limiti

    Args:
        file: UploadedFile object
        allowed_extensions: Set di estensioni ammesse (default ALLOWED_FILE_EXTENSIONS)
        max_size: Dimensione massima in bytes

    Returns:
        tuple: (is_valid, error_message)
    """
    allowed = allowed_extensions or ALLOWED_FILE_EXTENSIONS

    if file_extension(file.name) not in allowed:
        allowed_list = ", ".join(sorted(allowed))
        return False, f"Tipo file non consentito. Formati permessi: {allowed_list}"

    if file.size > max_size:
        max_mb = max_size / (1024 * 1024)
        actual_mb = file.size / (1024 * 1024)
        return False, f"File troppo grande ({actual_mb:.1f}MB). Dimensione massima: {max_mb:.0f}MB"

    return True, None
