"""
商品基础设施层包。
提供仓储、库存锁和模块工厂的实现。
"""
