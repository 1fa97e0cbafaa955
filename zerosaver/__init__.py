"""
ZeroSaver 剩余食品交易核心
提供折扣商品库存、预订购物车、商家审核与环保影响估算
"""

__version__ = "0.1.0"
