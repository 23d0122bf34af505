"""erbgen: 埋め込みテンプレート（.erb）をPython関数にコンパイルするビルド時ジェネレータ"""

from erbgen.core.engine.config_model import GeneratorConfig, load_config
from erbgen.core.engine.generator import Generator, generate
from erbgen.core.engine.transform import compile_template

__version__ = "0.1.0"

__all__ = ["Generator", "GeneratorConfig", "compile_template", "generate", "load_config"]
