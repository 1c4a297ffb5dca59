# Infrastructure Persistence Package
from .text_format import TextDeckRepository
from .yaml_format import YamlDeckRepository

__all__ = ["TextDeckRepository", "YamlDeckRepository"]
