import jinja2
from litestar.contrib.jinja import JinjaTemplateEngine

from formhandler.form import Form
from formhandler.template import TEMPLATE_DIR, Template, get_template_config, get_template_directories


class MockTemplateEngine:
    def __init__(self, templates: dict[str, str]):
        self._env = jinja2.Environment(loader=jinja2.DictLoader(templates))

    def get_template(self, name: str):
        return self._env.get_template(name)


def litestar_engine(templates: dict[str, str]) -> JinjaTemplateEngine:
    return JinjaTemplateEngine(engine_instance=jinja2.Environment(loader=jinja2.DictLoader(templates)))


# --- _candidates() tests ---


def test_candidates_no_slugs():
    t = Template("form")
    assert t._candidates() == ["form.html"]


def test_candidates_skip_empty_slugs():
    t = Template("form", "")
    assert t._candidates() == ["form.html"]


def test_candidates_two_slugs():
    t = Template("form", "contact", "wide")
    assert t._candidates() == [
        "form-contact-wide.html",
        "form-contact.html",
        "form.html",
    ]


# --- try_render() tests ---


def test_try_render_returns_rendered_string_when_template_found():
    engine = MockTemplateEngine({"form.html": "Hello, {{ name }}!"})
    t = Template("form")
    assert t.try_render(engine, name="World") == "Hello, World!"


def test_try_render_returns_none_when_no_template_exists():
    engine = MockTemplateEngine({})
    assert Template("form", "contact").try_render(engine) is None


def test_try_render_uses_most_specific_template_first():
    engine = MockTemplateEngine(
        {
            "form-contact.html": "Contact form",
            "form.html": "Generic form",
        }
    )
    assert Template("form", "contact").try_render(engine) == "Contact form"


def test_try_render_merges_context():
    engine = MockTemplateEngine({"form.html": "{{ a }}{{ b }}"})
    t = Template("form", "signup", context={"a": 1, "b": 1})
    assert t.try_render(engine, b=2) == "12"


def test_try_render_with_litestar_engine():
    engine = litestar_engine({"form.html": "Generic form"})
    assert Template("form", "contact").try_render(engine) == "Generic form"
    assert Template("missing").try_render(engine) is None


# --- Form rendering through templates ---


def test_form_uses_named_template(make_submission):
    engine = litestar_engine({
        "form-signup.html": "{% for f in form.value_fields() %}{{ f.name }};{% endfor %}",
    })
    form = Form(make_submission(), name="signup", csrf_protection=False)
    form.text_field("email")
    assert str(form.render(engine)) == "email;"


def test_form_falls_back_to_default_rendering(make_submission):
    form = Form(make_submission(), name="signup", csrf_protection=False)
    form.text_field("email")
    assert str(form.render(litestar_engine({}))) == str(form.render())


# --- Template directories ---


def test_template_directories(tmp_path):
    assert get_template_directories() == [TEMPLATE_DIR]
    (tmp_path / "templates").mkdir()
    assert get_template_directories() == [tmp_path / "templates", TEMPLATE_DIR]


def test_template_config_uses_jinja():
    config = get_template_config()
    assert config.engine is JinjaTemplateEngine
    assert TEMPLATE_DIR in config.directory
