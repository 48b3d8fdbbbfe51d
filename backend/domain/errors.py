"""
Domain: 例外定義。
「設定層級」錯誤（未知代號、目錄不可用）需傳遞給呼叫端；
「資料層級」錯誤（上游失敗、無重疊區間）由 application 層吸收為空序列。
"""


class CrossrateError(Exception):
    """所有 Crossrate 業務例外的基底類別。"""


class UnresolvedSymbolError(CrossrateError):
    """代號不在加密貨幣目錄中。"""

    def __init__(self, symbol: str):
        super().__init__(f"Unresolved symbol: {symbol}")
        self.symbol = symbol


class CatalogUnavailableError(CrossrateError):
    """目錄抓取失敗且沒有任何舊快取可用。"""


class UpstreamUnavailableError(CrossrateError):
    """上游 API 呼叫失敗或回傳格式不正確。"""


class NoOverlapError(CrossrateError):
    """分子與分母序列的時間範圍沒有任何重疊。"""
