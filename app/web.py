"""HTML page rendering for the add-on configuration experience."""

from __future__ import annotations

import json
from html import escape
from textwrap import dedent

from .config import Settings
from .languages import SUPPORTED_LANGUAGES, find_language


CONFIG_TEMPLATE = dedent(
    """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__APP_NAME__ · Configuration</title>
    <style>
        :root {
            color-scheme: dark;
            font-family: 'Inter', 'Segoe UI', system-ui, -apple-system, sans-serif;
            --surface: #141414;
            --text-primary: #f5f5f5;
            --text-muted: #a6a6a6;
            --outline: #1c1c1c;
            --accent: #f0f0f0;
            --accent-contrast: #050505;
            background: #000000;
            color: var(--text-primary);
        }
        * {
            box-sizing: border-box;
        }
        body {
            margin: 0;
            min-height: 100vh;
            background: #000000;
        }
        main {
            max-width: 560px;
            margin: 0 auto;
            padding: 3rem 1.5rem 4rem;
        }
        header {
            text-align: center;
            margin-bottom: 2rem;
        }
        header p {
            color: var(--text-muted);
        }
        .card {
            background: var(--surface);
            border: 1px solid var(--outline);
            border-radius: 20px;
            padding: 1.75rem;
        }
        label {
            display: block;
            margin-bottom: 0.5rem;
            font-weight: 600;
        }
        select, input {
            width: 100%;
            padding: 0.75rem;
            border-radius: 12px;
            border: 1px solid var(--outline);
            background: #090909;
            color: var(--text-primary);
            font-size: 1rem;
        }
        .actions {
            display: flex;
            gap: 0.75rem;
            margin-top: 1.5rem;
        }
        .actions a, .actions button {
            flex: 1;
            text-align: center;
            padding: 0.75rem;
            border-radius: 999px;
            border: none;
            background: var(--accent);
            color: var(--accent-contrast);
            font-weight: 600;
            text-decoration: none;
            cursor: pointer;
        }
        #manifest-url {
            margin-top: 1rem;
        }
    </style>
</head>
<body>
    <main>
        <header>
            <h1>__APP_NAME__</h1>
            <p>Trailers in your language. TMDB first, then YouTube, then TMDB in English.</p>
        </header>
        <section class="card">
            <label for="language">Lingua Trailer / Trailer Language</label>
            <select id="language">__LANGUAGE_OPTIONS__</select>
            <input id="manifest-url" type="text" readonly />
            <div class="actions">
                <a id="install" href="#">Install</a>
                <button id="copy" type="button">Copy URL</button>
            </div>
        </section>
    </main>
    <script>
        (function () {
            const defaults = JSON.parse('__DEFAULTS_JSON__');
            const select = document.getElementById('language');
            const output = document.getElementById('manifest-url');
            const install = document.getElementById('install');
            select.value = defaults.language;

            function manifestUrl() {
                const config = encodeURIComponent(JSON.stringify({ language: select.value }));
                return `${window.location.origin}/${config}/manifest.json`;
            }

            function refresh() {
                const url = manifestUrl();
                output.value = url;
                install.href = url.replace(/^https?:/, 'stremio:');
            }

            select.addEventListener('change', refresh);
            document.getElementById('copy').addEventListener('click', () => {
                navigator.clipboard.writeText(output.value);
            });
            refresh();
        })();
    </script>
</body>
</html>
"""
)


def render_config_page(settings: Settings, *, language: str | None = None) -> str:
    """Return the full HTML for the `/configure` landing page."""

    selected = find_language(language) or settings.default_language
    options = "".join(
        '<option value="{code}"{selected}>{name}</option>'.format(
            code=definition.code,
            name=escape(f"{definition.name} ({definition.code})"),
            selected=" selected" if definition.code == selected else "",
        )
        for definition in SUPPORTED_LANGUAGES
    )
    defaults_json = json.dumps({"language": selected}).replace("</", "<\\/")

    html = CONFIG_TEMPLATE
    replacements = {
        "__APP_NAME__": escape(settings.app_name),
        "__LANGUAGE_OPTIONS__": options,
        "__DEFAULTS_JSON__": defaults_json,
    }
    for placeholder, value in replacements.items():
        html = html.replace(placeholder, value)
    return html
