"""
News Engine - feed posts and the reaction ledger.
"""

from unitportal.engines.news.news_feed import NewsFeed

__all__ = [
    "NewsFeed",
]
