"""modctl - 数据库实例模块管理命令行客户端"""

__version__ = "0.3.0"
