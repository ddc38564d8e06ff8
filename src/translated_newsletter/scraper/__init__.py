# ABOUTME: News source scraping module.
# ABOUTME: Selects the most interesting headline with the LLM and extracts its article text.

from translated_newsletter.scraper.fetcher import ArticleFetcher
from translated_newsletter.scraper.pages import PageClient
from translated_newsletter.scraper.scraper import SourceScraper
from translated_newsletter.scraper.selector import ArticleSelector

__all__ = ["ArticleFetcher", "ArticleSelector", "PageClient", "SourceScraper"]
