"""Tests for Optgroup and Option."""

import re

from formhandler.fields import Optgroup, Option


def pairs(options):
    return [(option.value, option.label) for option in options]


TITLE = "How many kids do you have?"


class TestOptgroupOptions:
    def test_label(self):
        assert Optgroup(TITLE).label == TITLE

    def test_set_options(self):
        optgroup = Optgroup(TITLE)
        options = [Option("1", "One"), Option("2", "Two"), Option("3", "Three")]
        optgroup.set_options(options)
        assert optgroup.options == options
        assert len(optgroup.options) == 3

    def test_add_option_and_options(self):
        optgroup = Optgroup(TITLE)
        optgroup.set_options([Option("1", "One"), Option("2", "Two"), Option("3", "Three")])

        optgroup.add_option(Option("4", "Four"))
        assert len(optgroup.options) == 4
        assert all(isinstance(option, Option) for option in optgroup.options)

        optgroup.add_options([Option("0", "None")])
        assert len(optgroup.options) == 5
        assert pairs(optgroup.options) == [
            ("1", "One"), ("2", "Two"), ("3", "Three"), ("4", "Four"), ("0", "None"),
        ]

    def test_options_from_dict(self):
        optgroup = Optgroup(TITLE)
        optgroup.set_options([Option("9", "Nine")])

        optgroup.set_options_from_dict({"1": "One", "2": "Two", "3": "Three"})
        assert pairs(optgroup.options) == [("1", "One"), ("2", "Two"), ("3", "Three")]

        optgroup.add_options_from_dict({"4": "Four", 0: "None"})
        assert pairs(optgroup.options) == [
            ("1", "One"), ("2", "Two"), ("3", "Three"), ("4", "Four"), ("0", "None"),
        ]

    def test_add_option_to_new_group(self):
        option = Option("4", "Four")
        optgroup = Optgroup(TITLE).add_option(option)
        assert optgroup.options == [option]

    def test_disabled(self):
        optgroup = Optgroup(TITLE)
        assert optgroup.disabled is False
        optgroup.disabled = True
        assert optgroup.disabled is True


class TestOptgroupRendering:
    def test_render_markup(self):
        optgroup = Optgroup(TITLE, disabled=True, id="kids", css_class="className", style="color: black")
        optgroup.set_options_from_dict({"1": "One", "2": "Two"})

        html = str(optgroup)

        assert re.fullmatch(
            r'<optgroup label="(.*?)"(.*?)>(<option value="(.*?)">(.*?)</option>)*</optgroup>',
            html,
        )
        assert 'label="How many kids do you have?"' in html
        assert 'disabled="disabled"' in html
        assert 'id="kids"' in html
        assert 'class="className"' in html
        assert 'style="color: black"' in html
        assert '<option value="1">One</option><option value="2">Two</option>' in html

    def test_render_escapes_label(self):
        html = str(Optgroup('<b>"kids"</b>'))
        assert "<b>" not in html
        assert "&lt;b&gt;" in html

    def test_render_marks_selected_values(self):
        optgroup = Optgroup("Numbers").set_options_from_dict({"1": "One", "2": "Two"})
        html = str(optgroup.render({"2"}))
        assert '<option value="2" selected="selected">Two</option>' in html
        assert '<option value="1">One</option>' in html

    def test_option_label_defaults_to_value(self):
        option = Option(5)
        assert option.value == "5"
        assert option.label == "5"
        assert str(option) == '<option value="5">5</option>'
