from .envelope import EnvelopeCipher

__all__ = ["EnvelopeCipher"]
