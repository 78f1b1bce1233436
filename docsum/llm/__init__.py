from docsum.llm.client_base import BaseLlmClient
from docsum.llm.factory import LlmClientFactory
from docsum.llm.summarizer import Summarizer

__all__ = ["BaseLlmClient", "LlmClientFactory", "Summarizer"]
