from pathlib import Path
from typing import Dict


class Template:
    """Шаблон письма из файла, подстановка через str.format"""

    def __init__(self, template_path: Path):
        self.template_path = Path(template_path)
        self._template = None

    def load(self) -> str:
        """Загружает шаблон из файла"""
        if self._template is None:
            with open(self.template_path, 'r', encoding='utf-8') as f:
                self._template = f.read()
        return self._template

    def format(self, **kwargs) -> str:
        return self.load().format(**kwargs)


class TemplateManager:
    """Менеджер шаблонов писем"""

    def __init__(self, template_dir: str = None, suffix: str = ".html"):
        if template_dir is None:
            # app/utils -> app/templates
            self.template_dir = Path(__file__).parent.parent / "templates"
        else:
            self.template_dir = Path(template_dir)
        self.suffix = suffix
        self._templates: Dict[str, Template] = {}

    def get_template(self, name: str) -> Template:
        """Получает шаблон по имени"""
        if name not in self._templates:
            template_path = self.template_dir / f"{name}{self.suffix}"
            if not template_path.exists():
                raise FileNotFoundError(f"Template '{name}' not found at {template_path}")
            self._templates[name] = Template(template_path)

        return self._templates[name]

    def render(self, template_name: str, **kwargs) -> str:
        """Рендерит шаблон с параметрами"""
        return self.get_template(template_name).format(**kwargs)


template_manager = TemplateManager()
