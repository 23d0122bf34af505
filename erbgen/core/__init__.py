"""erbgen.core: IRと生成エンジン"""
