"""
Configuration constants for the CredVault core.
"""

# Application Metadata
APP_VERSION = "1.0.0"  # Use: Current version of the vault core. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "CredVault"  # Use: Name of the application, used in log and audit output. Type: str. Range: Any valid string.

# Security Settings
SALT_SIZE = 32  # Use: Size of the cryptographic salt in bytes for master passphrase hashing. Type: int. Range: At least 16 bytes (128 bits); 32 gives negligible collision probability.
HASH_SIZE = 32  # Use: Length in bytes of the derived master passphrase hash. Type: int. Range: 16 to 64 bytes.
KDF_ALGORITHM = "argon2id"  # Use: Key derivation function used for the master record. Type: str. Range: "argon2id" (memory-hard, preferred) or "pbkdf2" (PBKDF2-HMAC-SHA256).
ARGON2_TIME_COST = 2  # Use: Argon2id time cost parameter. Controls the number of iterations. Type: int. Range: Typically 1 to 10. Higher values increase security but also computation time.
ARGON2_MEMORY_COST = 65536  # Use: Argon2id memory cost parameter in KiB. Type: int. Range: At least 8 * ARGON2_PARALLELISM; 65536 (64 MB) recommended.
ARGON2_PARALLELISM = 4  # Use: Argon2id parallelism parameter (lanes). Type: int. Range: Typically 1 to 8.
PBKDF2_ITERATIONS = 310000  # Use: Number of PBKDF2-HMAC-SHA256 iterations when KDF_ALGORITHM is "pbkdf2". Type: int. Range: At least 100,000.

# Master Passphrase Rules
PASSPHRASE_MIN_LENGTH = 8  # Use: Minimum length of the master passphrase. Type: int. Range: Positive integer, 8 or more.
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"  # Use: Symbols that satisfy the special-character rule and are used by the password generator. Type: str. Range: Non-empty string of printable ASCII symbols.

# Lockout Settings
MAX_ATTEMPTS = 5  # Use: Failed unlock attempts that trigger a lock window. Type: int. Range: Positive integer (e.g., 3-10).
LOCK_DURATIONS = (  # Use: Escalating lock window durations in seconds, indexed by lock cycle (last entry repeats). Type: tuple[int, ...]. Range: Non-empty, non-decreasing positive integers.
    5 * 60,
    5 * 60,
    20 * 60,
    5 * 60 * 60,
)

# Password Generator Settings
PASSWORD_GENERATOR_DEFAULT_LENGTH = 15  # Use: Default length for generated passwords. Type: int. Range: PASSWORD_GENERATOR_MIN_LENGTH or more.
PASSWORD_GENERATOR_MIN_LENGTH = 4  # Use: Minimum length that still fits one character of every class. Type: int. Range: Equal to the number of character classes.
CHARSET_UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"  # Use: Uppercase character class. Type: str. Range: Non-empty string.
CHARSET_LOWERCASE = "abcdefghijklmnopqrstuvwxyz"  # Use: Lowercase character class. Type: str. Range: Non-empty string.
CHARSET_DIGITS = "0123456789"  # Use: Digit character class. Type: str. Range: Non-empty string.
CHARSET_SPECIAL = SPECIAL_CHARACTERS  # Use: Special symbol character class. Type: str. Range: Non-empty string.

# CSV Settings
CSV_HEADER_COLUMNS = ("url", "username", "password")  # Use: Required CSV header, in this exact order. Type: tuple[str, str, str]. Range: Fixed.
CSV_EXPORT_PREFIX = "passwords"  # Use: Filename prefix for exported CSV files. Type: str. Range: Any valid filename fragment.
CSV_EXPORT_DATE_FORMAT = "%d-%m-%Y"  # Use: strftime format of the date embedded in export filenames. Type: str. Range: Filename-safe strftime pattern.
ID_RANDOM_LENGTH = 9  # Use: Number of base-36 random characters in a generated entry id. Type: int. Range: Positive integer.

# File and Directory Names
CONFIG_DIR_NAME = ".credvault"  # Use: Name of the hidden directory within the user's home directory holding the vault records. Type: str. Range: Any valid directory name.
ENTRIES_FILE = "entries.json"  # Use: Filename of the credential list record. Type: str. Range: Any valid filename.
MASTER_RECORD_FILE = "master.json"  # Use: Filename of the master passphrase hash/salt record. Type: str. Range: Any valid filename.
LOCKOUT_FILE = "lockout.json"  # Use: Filename of the lockout counters record. Type: str. Range: Any valid filename.
LOG_DIR_NAME = "logs"  # Use: Subdirectory of the store directory holding the audit log. Type: str. Range: Any valid directory name.
AUDIT_LOG_FILE = "audit.log"  # Use: Filename for the security audit log. Type: str. Range: Any valid filename.

# Logging
LOG_LEVEL = "INFO"  # Use: Default level passed to logging.basicConfig. Type: str. Range: DEBUG, INFO, WARNING, ERROR, CRITICAL.
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"  # Use: Format string for log records. Type: str. Range: Valid logging format string.
