"""Tests for site/forms.py."""

from __future__ import annotations

from vimrel.site.forms import find_form, parse_forms

LOGIN_PAGE = """
<html><body>
<form name="search" action="/search.php" method="get">
  <input type="text" name="keywords">
</form>
<form name="login" action="login.php" method="post">
  <input type="hidden" name="authenticate" value="true">
  <input type="hidden" name="referrer" value="">
  <input type="text" name="userName">
  <input type="password" name="password">
  <input type="submit" value="login">
</form>
</body></html>
"""

SCRIPT_PAGE = """
<form name="script" action="add_script_version.php" method="post" enctype="multipart/form-data">
  <input type="hidden" name="script_id" value="3166">
  <input type="file" name="script_file">
  <select name="vim_version">
    <option value="7.0">7.0</option>
    <option value="7.2" selected>7.2</option>
  </select>
  <select name="platform"><option>all</option><option>unix</option></select>
  <input type="text" name="script_version" value="">
  <textarea name="version_comment">old &amp; text</textarea>
  <input type="checkbox" name="notify" checked>
  <input type="checkbox" name="unchecked" value="1">
  <input type="submit" name="add_script" value="upload">
</form>
"""


class TestParseForms:
    def test_finds_all_forms(self) -> None:
        forms = parse_forms(LOGIN_PAGE, "https://www.vim.org/login.php")
        assert [f.name for f in forms] == ["search", "login"]

    def test_action_and_method(self) -> None:
        forms = parse_forms(LOGIN_PAGE, "https://www.vim.org/login.php")
        assert forms[0].action == "https://www.vim.org/search.php"
        assert forms[0].method == "GET"
        assert forms[1].action == "https://www.vim.org/login.php"
        assert forms[1].method == "POST"

    def test_default_values(self) -> None:
        form = parse_forms(LOGIN_PAGE, "https://www.vim.org/login.php")[1]
        assert form.fields == [
            ("authenticate", "true"),
            ("referrer", ""),
            ("userName", ""),
            ("password", ""),
        ]
        # unnamed submit buttons are not sent
        assert form.buttons == []

    def test_upload_form(self) -> None:
        url = "https://www.vim.org/scripts/add_script_version.php?script_id=3166"
        form = parse_forms(SCRIPT_PAGE, url)[0]

        assert form.action == "https://www.vim.org/scripts/add_script_version.php"
        assert form.file_fields == ["script_file"]
        assert form.get("vim_version") == "7.2"
        assert form.get("platform") == "all"
        assert form.get("version_comment") == "old & text"
        assert form.get("notify") == "on"
        assert form.get("unchecked") is None
        assert form.buttons == [("add_script", "upload")]

    def test_form_without_action_posts_to_page(self) -> None:
        forms = parse_forms('<form name="x"><input name="a" value="1"></form>', "http://h/p.php?q=1")
        assert forms[0].action == "http://h/p.php?q=1"
        assert forms[0].method == "GET"

    def test_controls_outside_forms_are_ignored(self) -> None:
        forms = parse_forms('<input name="a"><form name="x"></form><input name="b">', "http://h/")
        assert forms[0].fields == []


class TestHtmlForm:
    def test_set_replaces_and_appends(self) -> None:
        form = parse_forms(LOGIN_PAGE, "https://www.vim.org/login.php")[1]
        form.set("userName", "me")
        form.set("extra", "x")
        assert form.get("userName") == "me"
        assert form.fields[-1] == ("extra", "x")

    def test_submission_includes_button(self) -> None:
        form = parse_forms(SCRIPT_PAGE, "https://www.vim.org/scripts/")[0]
        assert form.submission()[-1] == ("add_script", "upload")
        assert ("add_script", "upload") not in form.submission(button=None)


class TestFindForm:
    def test_by_name_and_method(self) -> None:
        forms = parse_forms(LOGIN_PAGE, "https://www.vim.org/login.php")
        login = find_form(forms, "login")
        assert login is not None and login.name == "login"
        assert find_form(forms, "login", method="post") is login
        assert find_form(forms, "login", method="GET") is None
        assert find_form(forms, "nope") is None
