# topmark:header:start
#
#   project      : DwtGuard
#   file         : samples.py
#   file_relpath : tests/samples.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Sample documents shared by the test suite.

``TEMPLATE_TEXT`` is the template stored at ``/Templates/main.dwt``.
``NEW_INSTANCE_TEXT`` is exactly what resolving it for ``/about.html`` with no
instance state produces; ``INSTANCE_TEXT`` is the same page after authoring
(a different title, content and ``pageTitle`` value), still in sync with the
template.
"""

from __future__ import annotations

TEMPLATE_PATH: str = "/Templates/main.dwt"

TEMPLATE_TEXT: str = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "<head>\n"
    '<!-- TemplateBeginEditable name="doctitle" --><title>Untitled</title>'
    "<!-- TemplateEndEditable -->\n"
    '<!-- TemplateParam name="pageTitle" type="text" value="Home" -->\n'
    '<!-- TemplateParam name="showSidebar" type="boolean" value="true" -->\n'
    '<link href="../css/site.css" rel="stylesheet">\n'
    "</head>\n"
    "<body>\n"
    "<h1>@@(pageTitle)@@</h1>\n"
    '<!-- TemplateBeginIf cond="showSidebar" --><aside>Sidebar</aside><!-- TemplateEndIf -->\n'
    '<!-- TemplateBeginEditable name="content" --><p>Default</p><!-- TemplateEndEditable -->\n'
    "</body>\n"
    "</html>\n"
)

INSTANCE_BEGIN_LINE: str = (
    '<html><!-- InstanceBegin template="/Templates/main.dwt" codeOutsideHTMLIsLocked="true" -->\n'
)

NEW_INSTANCE_TEXT: str = (
    "<!DOCTYPE html>\n"
    + INSTANCE_BEGIN_LINE
    + "<head>\n"
    '<!-- InstanceBeginEditable name="doctitle" --><title>Untitled</title>'
    "<!-- InstanceEndEditable -->\n"
    '<link href="css/site.css" rel="stylesheet">\n'
    '\t<!-- InstanceParam name="pageTitle" type="text" value="Home" -->\n'
    '\t<!-- InstanceParam name="showSidebar" type="boolean" value="true" -->\n'
    "</head>\n"
    "<body>\n"
    "<h1>Home</h1>\n"
    "<aside>Sidebar</aside>\n"
    '<!-- InstanceBeginEditable name="content" --><p>Default</p><!-- InstanceEndEditable -->\n'
    "</body>\n"
    "<!-- InstanceEnd --></html>\n"
)

INSTANCE_TEXT: str = (
    "<!DOCTYPE html>\n"
    + INSTANCE_BEGIN_LINE
    + "<head>\n"
    '<!-- InstanceBeginEditable name="doctitle" --><title>About</title>'
    "<!-- InstanceEndEditable -->\n"
    '<link href="css/site.css" rel="stylesheet">\n'
    '\t<!-- InstanceParam name="pageTitle" type="text" value="About" -->\n'
    '\t<!-- InstanceParam name="showSidebar" type="boolean" value="true" -->\n'
    "</head>\n"
    "<body>\n"
    "<h1>About</h1>\n"
    "<aside>Sidebar</aside>\n"
    '<!-- InstanceBeginEditable name="content" --><p>About us</p>\n'
    '<!-- #BeginLibraryItem "/Library/footer.lbi" --><footer>Old</footer>'
    "<!-- #EndLibraryItem --><!-- InstanceEndEditable -->\n"
    "</body>\n"
    "<!-- InstanceEnd --></html>\n"
)

LIBRARY_ITEM_TEXT: str = "<footer>New</footer>"

REPEAT_TEMPLATE_TEXT: str = (
    "<html>\n"
    "<head>\n"
    "</head>\n"
    "<body>\n"
    '<ul><!-- TemplateBeginRepeat name="items" -->'
    '<li><!-- TemplateBeginEditable name="item" -->Item<!-- TemplateEndEditable --></li>'
    "<!-- TemplateEndRepeat --></ul>\n"
    "</body>\n"
    "</html>\n"
)


def repeat_entry(content: str) -> str:
    """Return one resolved entry of the ``items`` repeat region."""
    return (
        "<!-- InstanceBeginRepeatEntry -->"
        f'<li><!-- InstanceBeginEditable name="item" -->{content}<!-- InstanceEndEditable --></li>'
        "<!-- InstanceEndRepeatEntry -->"
    )


def repeat_instance(*entries: str, separator: str = "") -> str:
    """Return the repeat template resolved with the given entry contents."""
    body: str = separator.join(repeat_entry(e) for e in entries)
    return (
        "<html>"
        '<!-- InstanceBegin template="/Templates/list.dwt" codeOutsideHTMLIsLocked="true" -->\n'
        "<head>\n"
        "</head>\n"
        "<body>\n"
        f'<ul><!-- InstanceBeginRepeat name="items" -->{body}<!-- InstanceEndRepeat --></ul>\n'
        "</body>\n"
        "<!-- InstanceEnd --></html>\n"
    )
