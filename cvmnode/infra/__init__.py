from .http import Auth, HttpClient, HttpError

__all__ = ["Auth", "HttpClient", "HttpError"]
