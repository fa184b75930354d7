# UI module for Eunoia application
from .main_window import MainWindow
from .meditate_page import MeditatePage
from .progress_page import ProgressPage
from .journal_page import JournalPage

__all__ = ['MainWindow', 'MeditatePage', 'ProgressPage', 'JournalPage']
