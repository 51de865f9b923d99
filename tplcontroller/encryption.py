"""Implementation of the web interface obfuscation used during login.

The device never receives the password itself. Its login page scrambles the
password with a fixed table, then scrambles one challenge value keyed by that
result, looking the output characters up in a dictionary which is also part
of the challenge. Both steps use the same primitive:

for every position up to the longer of the two inputs, the character codes of
value and key are xor-ed (a missing character counts as ``0xBB``) and the
result, modulo the dictionary length, selects the output character.

This is a fixed scheme defined by the device firmware, not a cipher.
"""

from __future__ import annotations

_PAD = 0xBB

PASSWORD_KEY = "RDpbLfCPsJZ7fiv"
PASSWORD_DICTIONARY = (
    "yLwVl0zKqws7LgKPRQ84Mdt708T1qQ3Ha7xv3H7NyU84p21BriUWBU43odz3iP4rBL3cD02K"
    "ZciXTysVXiV8ngg6vL48rPJyAUw0HurW20xqxv9aYb4M9wK1Ae0wlro510qXeU07kV57fQMc"
    "8L6aLgMLwygtc0F10a0Dg70TOoouyFhdysuRMO51yY5ZlOZZLEal1h0t9YQW0Ko7oBwmCAHo"
    "ic4HYbUyVeU3sfQ1xtXcPcf1aT303wAQhv66qzW"
)


def security_encode(value: str, key: str, dictionary: str) -> str:
    """Scramble value with key, picking output characters from dictionary."""
    if not dictionary:
        raise ValueError("Dictionary must not be empty")

    output = []
    for index in range(max(len(value), len(key))):
        left = ord(value[index]) if index < len(value) else _PAD
        right = ord(key[index]) if index < len(key) else _PAD
        output.append(dictionary[(left ^ right) % len(dictionary)])

    return "".join(output)


def encrypt(value: str, key: str | None = None, dictionary: str | None = None) -> str:
    """Apply the login obfuscation.

    Called with a single argument the value is treated as a password and
    scrambled with the fixed password key and dictionary. Otherwise value is
    scrambled with key, using dictionary for the output characters.
    """
    if key is None:
        return security_encode(value, PASSWORD_KEY, PASSWORD_DICTIONARY)
    if dictionary is None:
        dictionary = PASSWORD_DICTIONARY
    return security_encode(value, key, dictionary)
