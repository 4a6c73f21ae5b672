from html import escape

PAGE = """<!DOCTYPE html>
<html>
<body>
    <center>
        <h1>Analyze</h1>
        <h2>{heading}</h2>
        <pre>{body}</pre>
    </center>
</body>
</html>
"""

def render_result(heading: str, formatted_json: str) -> str:
    return PAGE.format(heading=escape(heading), body=escape(formatted_json))
