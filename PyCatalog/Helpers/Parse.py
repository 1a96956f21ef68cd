import json
import logging

import regex

def ParseDelayFromHeader(value : str) -> float:
    """
    Try to figure out how long a suggested retry-after is
    """
    if not isinstance(value, str):
        return 12.3

    match = regex.match(r"([0-9\.]+)(\w+)?", value)
    if not match:
        return 32.1

    try:
        delay, unit = match.groups()
        delay = float(delay)
        unit = unit.lower() if unit else 's'
        if unit == 's':
            pass
        elif unit == 'm':
            delay *= 60
        elif unit == 'ms':
            delay /= 1000
        else:
            logging.error(f"Unexpected time unit '{unit}'")
            return 6.66

        return max(1, delay)  # at least 1 second

    except ValueError as e:
        logging.error(f"Unexpected time value '{value}' ({e})")
        return 6.66

def ParseErrorMessageFromText(value : str) -> str|None:
    """
    Try to extract a readable error message from an HTTP response body,
    e.g. {"error": {"message": "..."}} or {"message": "..."}, possibly embedded in other text.
    """
    if not isinstance(value, str):
        return None

    text = value.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
        brace_start = text.find('{')
        brace_end = text.rfind('}')
        if brace_start != -1 and brace_end > brace_start:
            try:
                data = json.loads(text[brace_start:brace_end + 1])
            except json.JSONDecodeError:
                data = None

    if isinstance(data, dict):
        error = data.get('error')
        if isinstance(error, dict):
            for key in ('message', 'msg', 'description', 'detail'):
                message = error.get(key)
                if isinstance(message, str) and message.strip():
                    return message.strip()

        elif isinstance(error, str) and error.strip():
            return error.strip()

        for key in ('message', 'detail', 'description'):
            message = data.get(key)
            if isinstance(message, str) and message.strip():
                return message.strip()

    match = regex.search(r'"message"\s*:\s*"((?:[^"\\]|\\.)*)"', text)
    if match:
        raw = match.group(1)
        try:
            return json.loads(f'"{raw}"')
        except json.JSONDecodeError:
            return raw

    return None
