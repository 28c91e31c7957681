"""
Serialized number builders for tests.
"""


def make_code(game_code='0001', pack_number='1234567', serial='000', identifier='0123456789'):
    """Build a 24-digit serialized number."""
    return f"{game_code}{pack_number}{serial}{identifier}"
