"""
shared/utils.py

Shared utility functions used across multiple modules.
"""

import uuid

def generate_interaction_id() -> str:
    """
    Generates a unique interaction ID using UUID4.

    Every query gets its own identifier so that log lines emitted by concurrently
    running stages can be correlated afterwards.

    Returns:
        str: A UUID4 string (e.g., "a1b2c3d4-e5f6-7890-abcd-ef1234567890")
    """
    return str(uuid.uuid4())

def truncate_message_for_logging(message: str, max_length: int = 100) -> str:
    """
    Truncate long messages for logging purposes.

    Args:
        message (str): Message to truncate
        max_length (int): Maximum length before truncation (default: 100)

    Returns:
        str: Truncated message with ellipsis if needed
    """
    if len(message) <= max_length:
        return message
    return message[:max_length] + "..."
