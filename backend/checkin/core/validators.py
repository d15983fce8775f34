"""
Input validation and sanitization utilities.
"""

import re
import html


class StringSanitizer:
    """
    String sanitization utilities for preventing XSS and injection attacks.
    """

    # Control characters to strip (except newlines, tabs, carriage returns)
    CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    # Free-text observations are shown back to the patient and the clinician
    MAX_OBSERVATION_LENGTH = 2000

    @classmethod
    def _base_sanitize(cls, value: str, escape_html: bool = True) -> str:
        """
        Base sanitization function with common steps shared by all sanitizers.

        Performs the following operations:
        1. Strips control characters (except newlines, tabs, carriage returns)
        2. Strips leading/trailing whitespace
        3. Optionally escapes HTML entities

        Args:
            value: String to sanitize
            escape_html: Whether to escape HTML entities (default: True)

        Returns:
            Sanitized string with common steps applied
        """
        value = cls.CONTROL_CHARS_PATTERN.sub("", value)
        value = value.strip()
        if escape_html:
            value = html.escape(value)
        return value

    @classmethod
    def sanitize_observation(cls, observation: str) -> str:
        """
        Sanitize the optional free-text observation attached to a check-in.

        Args:
            observation: Patient's note

        Returns:
            Sanitized note, truncated to MAX_OBSERVATION_LENGTH
        """
        # Truncate before escaping so entities are never cut in half
        observation = cls._base_sanitize(observation, escape_html=False)
        if len(observation) > cls.MAX_OBSERVATION_LENGTH:
            observation = observation[: cls.MAX_OBSERVATION_LENGTH]
        return html.escape(observation)

    @classmethod
    def normalize_token(cls, token: str) -> str:
        """
        Normalize an option value token (e.g. " fatigue_intense " -> "FATIGUE_INTENSE").

        Args:
            token: Raw token from an admin request or a submitted answer

        Returns:
            Upper-case token with control characters and outer whitespace removed
        """
        return cls._base_sanitize(token, escape_html=False).upper()


class TextValidator:
    """
    Text validation utilities for schema field validation.
    """

    TOKEN_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")

    @staticmethod
    def validate_non_empty_text(value: str, field_name: str = "Text") -> str:
        """
        Validate that text is not empty or whitespace-only.

        Args:
            value: Text to validate
            field_name: Name of the field for error messages

        Returns:
            The stripped value if valid

        Raises:
            ValueError: If the text is empty or whitespace-only
        """
        stripped = value.strip()
        if not stripped:
            raise ValueError(f"{field_name} cannot be empty or whitespace-only")
        return stripped

    @staticmethod
    def validate_positive_id(value: int, field_name: str = "ID") -> int:
        """
        Validate that an ID is a positive integer.

        Args:
            value: ID to validate
            field_name: Name of the field for error messages

        Returns:
            The value if valid

        Raises:
            ValueError: If the ID is not positive
        """
        if value <= 0:
            raise ValueError(f"{field_name} must be a positive integer")
        return value

    @classmethod
    def validate_token(cls, value: str, field_name: str = "Token") -> str:
        """
        Validate an option value token.

        Tokens are the contract the decision engine matches against, so they
        are restricted to upper-case identifiers.

        Args:
            value: Token to validate
            field_name: Name of the field for error messages

        Returns:
            The normalized token if valid

        Raises:
            ValueError: If the token is not an upper-case identifier
        """
        token = StringSanitizer.normalize_token(value)
        if not cls.TOKEN_PATTERN.match(token):
            raise ValueError(
                f"{field_name} must contain only letters, digits and underscores "
                "and start with a letter"
            )
        return token
