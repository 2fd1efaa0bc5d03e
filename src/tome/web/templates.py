_HEAD = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{{ page_title }}</title></head>
<body>
<nav>
  <a href="/">Index</a> |
  <a href="/overview">All articles</a> |
  <a href="/media">Media</a>
</nav>
"""

_FOOT = """
</body>
</html>
"""

INDEX_TEMPLATE = (
    _HEAD
    + """
<main>{{ html | safe }}</main>
<p><a href="/edit/index">Edit</a></p>
"""
    + _FOOT
)

ARTICLE_TEMPLATE = (
    _HEAD
    + """
<h1>{{ title }}</h1>
{% if version %}<p>Revision {{ version }}</p>{% endif %}
<main>{{ html | safe }}</main>
<p>
  <a href="{{ url_for('tome.edit_article', title=title) }}">Edit</a> |
  <a href="{{ url_for('tome.article_history', title=title) }}">History</a>
</p>
"""
    + _FOOT
)

EDITOR_TEMPLATE = (
    _HEAD
    + """
<h1>Editing {{ title }}</h1>
<form method="post" action="{{ action }}">
  <textarea name="content" rows="30" cols="100">{{ content }}</textarea>
  <p><button type="submit">Save</button></p>
</form>
"""
    + _FOOT
)

HISTORY_TEMPLATE = (
    _HEAD
    + """
<h1>History of {{ title }}</h1>
<ul>
{% for entry in entries %}
  <li><a href="{{ url_for('tome.article_version', title=title, version=entry.id) }}">{{ entry.timestamp }}</a></li>
{% else %}
  <li>No revisions yet.</li>
{% endfor %}
</ul>
<p><a href="{{ url_for('tome.get_article', title=title) }}">Current version</a></p>
"""
    + _FOOT
)

OVERVIEW_TEMPLATE = (
    _HEAD
    + """
<h1>All articles</h1>
<ul>
{% for entry in entries %}
  <li><a href="/article/{{ entry.slug }}">{{ entry.title }}</a></li>
{% endfor %}
</ul>
"""
    + _FOOT
)

MEDIA_TEMPLATE = (
    _HEAD
    + """
<h1>Media</h1>
<form method="post" enctype="multipart/form-data">
  <input type="file" name="image">
  <button type="submit">Upload</button>
</form>
<p>Allowed: {{ allowed_uploads }}</p>
<ul>
{% for name in media %}
  <li><a href="{{ url_for('tome.media_file', filename=name) }}">{{ name }}</a></li>
{% endfor %}
</ul>
"""
    + _FOOT
)
