from oembed_resolver.http.fetcher import FetchResult, HttpFetcher, UrlFetcher

__all__ = ["FetchResult", "HttpFetcher", "UrlFetcher"]
