"""抓取相关的基础设施异常。"""


class BrowserUnavailableError(RuntimeError):
    """共享浏览器无法启动（未安装/启动失败/超时等）。"""


class ScrapeError(RuntimeError):
    """单个数据源抓取失败，由调用方在本地恢复。"""

    def __init__(self, message: str, source_name: str | None = None):
        self.source_name = source_name
        if source_name:
            message = f"[{source_name}] {message}"
        super().__init__(message)
