"""erbgen.core.engine: テンプレート変換・宣言スキャン・組み立て・生成ドライバ"""
