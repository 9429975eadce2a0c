"""
HTML pages served by Pastebin Lite.
"""

CREATE_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Pastebin Lite</title>
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif; padding: 30px; }
        textarea { width: 100%; height: 150px; font-family: "Courier New", monospace; }
        button { padding: 10px 20px; margin-top: 10px; }
    </style>
</head>
<body>
    <h2>Pastebin Lite</h2>

    <textarea id="content" placeholder="Enter text here..."></textarea><br>

    <label>TTL (seconds):</label>
    <input type="number" id="ttl" min="1"><br><br>

    <label>Max Views:</label>
    <input type="number" id="views" min="1"><br><br>

    <button onclick="createPaste()">Create Paste</button>

    <p id="result"></p>

    <script>
        async function createPaste() {
            const content = document.getElementById('content').value;
            const ttl = document.getElementById('ttl').value;
            const views = document.getElementById('views').value;

            const res = await fetch('/api/pastes', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({
                    content,
                    ttl_seconds: ttl ? Number(ttl) : undefined,
                    max_views: views ? Number(views) : undefined
                })
            });

            const data = await res.json();
            const result = document.getElementById('result');
            result.textContent = '';
            if (!res.ok) {
                result.textContent = 'Error: ' + data.error;
                return;
            }
            const link = document.createElement('a');
            link.href = data.url;
            link.target = '_blank';
            link.textContent = data.url;
            result.append('Paste URL: ', link);
        }
    </script>
</body>
</html>"""

PASTE_PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>Paste</title></head>
<body><pre>{content}</pre></body></html>"""


def escape_html(text: str) -> str:
    """Escape &, < and > for embedding in markup. Nothing else is touched."""
    return (
        text
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def render_paste(content: str) -> str:
    return PASTE_PAGE.format(content=escape_html(content))
