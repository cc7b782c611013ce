class APIError(Exception):
    """Non-2xx response from the store API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Status {status_code}: {message}")
        self.status_code = status_code
        self.message = message

    @classmethod
    def from_response(cls, response):
        """Build from a requests response, preferring the server's `message`"""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('message'):
            message = str(body['message'])
        else:
            message = response.text or response.reason or 'Unknown error'
        return cls(response.status_code, message)
