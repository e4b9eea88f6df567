from docvision.summarization.base import BaseSummarizer
from docvision.summarization.factory import SummarizerFactory
from docvision.summarization.summarizer import Summarizer

__all__ = ["BaseSummarizer", "Summarizer", "SummarizerFactory"]
