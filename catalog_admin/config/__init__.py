"""
按环境划分的配置模块。
development、testing、production都基于base，并从env读取环境变量。
"""
