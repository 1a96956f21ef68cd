class Translation:
    """
    A response from a translation provider
    """
    def __init__(self, content : dict):
        self.content = content or {}

    @property
    def text(self) -> str|None:
        text = self.content.get('text')
        return text.strip() if text else None

    @property
    def has_translation(self) -> bool:
        return True if self.text else False

    @property
    def finish_reason(self):
        return self.content.get('finish_reason')

    @property
    def response_time(self):
        return self.content.get('response_time')

    @property
    def reached_token_limit(self) -> bool:
        return self.finish_reason == "length"

    @property
    def quota_reached(self) -> bool:
        return self.finish_reason == "quota_reached"

    @property
    def prompt_tokens(self) -> int|None:
        return self.content.get('prompt_tokens')

    @property
    def output_tokens(self) -> int|None:
        return self.content.get('output_tokens')
