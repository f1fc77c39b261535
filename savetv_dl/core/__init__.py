"""
Core application engine for orchestrating the download process.

The `DownloadManager` acts as the session coordinator: it logs in, lists the
video archive and hands each recording to the downloader in turn.
"""
