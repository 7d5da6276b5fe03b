"""News search package.

Modules:
    - `news_module`: provider configuration, the `NewsProvider` protocol and the
      newsapi.org / RapidAPI implementations.
    - `articles`: canonical article normalization.
"""
