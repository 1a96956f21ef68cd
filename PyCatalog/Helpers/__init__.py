from typing import Any

def FormatMessages(messages : list[dict[str,Any]]) -> str:
    lines : list[str] = []
    for index, message in enumerate(messages, start=1):
        lines.append(f"Message {index}")
        if 'role' in message:
            lines.append(f"Role: {message['role']}")
        if 'content' in message:
            content = str(message['content']).replace('\\n', '\n')
            lines.extend(["--------------------", content])
        lines.append("")

    return '\n'.join(lines)

def FormatErrorMessages(errors : list[Exception|str]) -> str:
    """
    Extract error messages from a list of errors
    """
    return ", ".join([ getattr(error, "message", None) or str(error) for error in errors ])
