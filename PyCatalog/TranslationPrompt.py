import json
from typing import Any

from PyCatalog.Helpers.Localization import GetLanguageName

linesep = '\n'

default_instructions = linesep.join([
    "Your task is to translate the user interface text of an application.",
    "",
    "The user will provide a JSON object. Translate every value into the target language and respond with a JSON object in exactly the same format.",
    "",
    "Requirements:",
    "1. Only translate the values, keep every key unchanged.",
    "2. Keep the JSON structure and any nesting unchanged; never convert objects or arrays to strings.",
    "3. Keep placeholders such as {{name}}, {count} or %s exactly as they are.",
    "4. Use the standard terminology of the target language for technical terms.",
    "5. Keep translations concise and natural for a user interface, and consistent within the group.",
    "6. Respond with the JSON object only.",
    ])

default_context_template = "This is part of a user interface translation project. The current group is \"{group}\". Keep the translation consistent and professional."

default_prompt_template = linesep.join([
    "{context}",
    "",
    "Translate all of the values in the following JSON object from {source_language} into {target_language}.",
    "",
    "```json",
    "{content}",
    "```",
    "",
    "Return the complete translated JSON object, in exactly the same format as the input but with the values translated into {target_language}.",
    ])

def GetGroupContext(group_name : str) -> str:
    """ Context sentence scoping the translation to a group """
    return default_context_template.format(group=group_name)

class TranslationPrompt:
    """
    Formats a request to translate one group of catalog entries
    """
    def __init__(self, instructions : str|None = None, supports_system_messages : bool = True):
        self.instructions : str = instructions or default_instructions
        self.supports_system_messages : bool = supports_system_messages
        self.system_role : str = "system"
        self.prompt_template : str = default_prompt_template
        self.source_language : str = "en"
        self.user_prompt : str|None = None
        self.messages : list[dict[str, str]] = []

    @property
    def content(self) -> list[dict[str, str]]:
        return self.messages

    def GenerateMessages(self, entries : dict[str, Any], target_language : str, context : str|None = None) -> None:
        """
        Generate the messages to request translation of a group

        :param entries: the key/value pairs to translate
        :param target_language: catalog code of the target language
        :param context: a description of where the entries are used
        """
        self.messages.clear()

        self.user_prompt = self.prompt_template.format(
            context=context or "",
            source_language=GetLanguageName(self.source_language),
            target_language=GetLanguageName(target_language),
            content=json.dumps(entries, ensure_ascii=False, indent=2)
        ).strip()

        if self.supports_system_messages:
            self.messages.append({'role': self.system_role, 'content': self.instructions})
            self.messages.append({'role': 'user', 'content': self.user_prompt})
        else:
            self.messages.append({'role': 'user', 'content': f"{self.instructions}\n\n{self.user_prompt}"})
