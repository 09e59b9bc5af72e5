"""
HTML templates for the dashboard and the API documentation pages.

Both documents are self-contained (inline CSS/JS, no external assets).
Rendering goes through a Jinja2 environment with autoescaping enabled, so
vendor/model names, descriptions and payload strings are always escaped.
"""

from urllib.parse import quote

from jinja2 import DictLoader, Environment, StrictUndefined

from pulitzer.reporting.utils import format_file_size, format_time


def url_path(path: str) -> str:
    """Percent-encode a relative link, keeping the '/' separators."""
    return quote(str(path), safe="/")


def success_rate_class(rate: str) -> str:
    """CSS class for a success-rate string such as '97.5%'."""
    try:
        value = float(str(rate).strip().rstrip("%"))
    except ValueError:
        return ""
    if value >= 95:
        return "success-high"
    if value >= 80:
        return "success-medium"
    return "success-low"


INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
    <style>
        * { box-sizing: border-box; }
        body {
            font-family: 'Segoe UI', Arial, sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f5f5f5;
            color: #333;
            line-height: 1.5;
        }
        .container {
            max-width: 1200px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        .header-bar {
            background: #2c3e50;
            color: white;
            padding: 16px 24px;
            margin: -30px -30px 24px -30px;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }
        .header-bar h1 { margin: 0; font-size: 1.4em; }
        .header-bar .subtitle { font-size: 0.9em; opacity: 0.85; margin: 4px 0 0 0; }
        .header-bar .timestamp { font-size: 0.85em; opacity: 0.85; }
        .stats-grid {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(180px, 1fr));
            gap: 10px;
            margin: 15px 0;
        }
        .stat-card {
            background: #f5f5f5;
            padding: 12px;
            border-radius: 4px;
            text-align: center;
        }
        .stat-value { font-size: 1.4em; font-weight: bold; color: #2c3e50; }
        .stat-label { font-size: 0.85em; color: #666; margin-top: 4px; }
        .vendor-toc { margin: 20px 0; font-size: 0.9em; }
        .vendor-toc ul { list-style: none; padding-left: 0; margin: 0; }
        .vendor-toc li { margin: 2px 0; }
        .vendor-toc .models { color: #666; }
        .type-group { margin-top: 28px; }
        .type-header {
            color: #2c3e50;
            font-size: 1.2em;
            margin-bottom: 12px;
            padding-bottom: 4px;
            border-bottom: 2px solid #3498db;
        }
        .report-grid {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(260px, 1fr));
            gap: 12px;
        }
        .report-card {
            border: 1px solid #e0e0e0;
            border-radius: 4px;
            padding: 12px 16px;
            background: #fafafa;
        }
        .report-card:hover { background: #f0f0f0; }
        .report-card h3 { margin: 0 0 6px 0; font-size: 1em; }
        .report-card a { color: #2980b9; text-decoration: none; }
        .report-card a:hover { text-decoration: underline; }
        .type-badge {
            display: inline-block;
            padding: 1px 8px;
            border-radius: 3px;
            color: white;
            font-size: 0.75em;
            font-weight: bold;
            text-transform: uppercase;
        }
        .type-read { background: #2980b9; }
        .type-write { background: #c0392b; }
        .type-api { background: #27ae60; }
        .type-firmware { background: #8e44ad; }
        .type-codeplug { background: #d35400; }
        .type-cps { background: #7f8c8d; }
        .report-radio { font-weight: bold; margin: 6px 0 2px 0; }
        .report-description { color: #555; font-size: 0.9em; margin: 4px 0; }
        .report-meta { color: #888; font-size: 0.8em; }
        .info-box {
            background-color: #e3f2fd;
            padding: 15px 20px;
            border-left: 4px solid #1976d2;
            margin: 15px 0;
        }
        .footer {
            margin-top: 40px;
            padding-top: 15px;
            border-top: 1px solid #ddd;
            color: #888;
            font-size: 0.85em;
        }
        code {
            background: #f0f0f0;
            padding: 1px 5px;
            border-radius: 3px;
            font-size: 0.9em;
        }
    </style>
</head>
<body>
<div class="container">
    <div class="header-bar">
        <div>
            <h1>{{ title }}</h1>
            <p class="subtitle">Radio protocol analysis reports and documentation</p>
        </div>
        <span class="timestamp">Last updated: {{ generated_at }}</span>
    </div>

    <div class="stats-grid">
        <div class="stat-card"><div class="stat-value">{{ aggregate.total_count }}</div><div class="stat-label">Total Reports</div></div>
        <div class="stat-card"><div class="stat-value">{{ aggregate.vendor_count }}</div><div class="stat-label">Vendors</div></div>
        <div class="stat-card"><div class="stat-value">{{ aggregate.model_count }}</div><div class="stat-label">Models</div></div>
    </div>

{% if sections %}
    <div class="vendor-toc">
        <ul>
        {% for vendor, models in aggregate.vendor_reports.items() %}
            <li><strong>{{ vendor }}</strong>:
                <span class="models">{% for model, reports in models.items() %}{{ model }} ({{ reports|length }}){% if not loop.last %}, {% endif %}{% endfor %}</span>
            </li>
        {% endfor %}
        </ul>
    </div>

    {% for section in sections %}
    <div class="type-group" id="type-{{ section.type }}">
        <h2 class="type-header">{{ section.label }} ({{ section.reports|length }})</h2>
        <div class="report-grid">
        {% for report in section.reports %}
            <div class="report-card">
                <h3><a href="{{ (link_prefix ~ report.rel_path)|url_path }}">{{ report.title }}</a></h3>
                <span class="type-badge type-{{ report.type }}">{{ report.type }}</span>
                <div class="report-radio">{{ report.vendor }} / {{ report.model }}</div>
                <div class="report-description">{{ section.description }}</div>
                <div class="report-meta">
                    <span>Size: {{ report.size|file_size }}</span> |
                    <span>Modified: {{ report.modified_at|timestamp }}</span>
                </div>
                <div class="report-meta"><code>{{ report.rel_path }}</code></div>
            </div>
        {% endfor %}
        </div>
    </div>
    {% endfor %}
{% else %}
    <div class="info-box empty-state">
        <p>No reports yet. Run a protocol analysis to generate reports under
        <code>{{ reports_root_name }}/</code>, then regenerate this index.</p>
    </div>
{% endif %}

    <div class="footer">
        <p>Generated by <strong>pulitzer</strong> on {{ generated_at }}</p>
        {% if aggregate.skipped_count %}
        <p>{{ aggregate.skipped_count }} file(s) outside the expected directory layout were not indexed.</p>
        {% endif %}
    </div>
</div>
</body>
</html>
"""


API_DOC_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ vendor }} {{ model }} {{ style.title }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 0; padding: 0; background-color: #f5f5f5; color: #333; }
        .container { max-width: 1200px; margin: 0 auto; background-color: white; padding: 20px; box-shadow: 0 0 10px rgba(0,0,0,0.1); }
        h1 { color: {{ style.primary_color }}; text-align: center; border-bottom: 3px solid {{ style.secondary_color }}; padding-bottom: 10px; }
        .radio-info { text-align: center; color: #555; margin-top: -5px; }
        .mode-label { display: inline-block; background: {{ style.header_bg_color }}; border: 1px solid {{ style.border_color }}; border-radius: 3px; padding: 1px 8px; font-size: 13px; }

        .command-card { border: 1px solid #ddd; border-radius: 8px; margin-bottom: 15px; overflow: hidden; box-shadow: 0 2px 4px rgba(0,0,0,0.05); }
        .command-header { background-color: #f8f8f8; padding: 12px; cursor: pointer; display: flex; justify-content: space-between; align-items: center; border-bottom: 1px solid #eee; }
        .command-name { font-size: 18px; font-weight: bold; color: {{ style.primary_color }}; }
        .command-meta { display: flex; gap: 15px; font-size: 13px; color: #666; }
        .command-body { padding: 0 15px 15px; }

        details { margin: 10px 0; }
        details summary { cursor: pointer; padding: 8px; background-color: #f9f9f9; border-radius: 4px; font-weight: bold; }
        details[open] summary { margin-bottom: 10px; }

        .response-container { background-color: {{ style.header_bg_color }}; padding: 10px; border-left: 4px solid {{ style.border_color }}; margin: 10px 0; border-radius: 4px; }

        .hex { font-family: 'Courier New', monospace; background-color: #f8f9fa; padding: 4px 8px; border-radius: 3px; overflow-wrap: break-word; word-break: break-all; }
        .ascii { font-family: 'Courier New', monospace; color: #d35400; overflow-wrap: break-word; word-break: break-all; }
        .description { color: #555; font-style: italic; }
        .field-label { font-weight: bold; color: #555; display: inline-block; width: 120px; }

        .timing { color: #8e44ad; font-weight: bold; }
        .category { display: inline-block; background-color: #f8f9fa; padding: 2px 6px; border-radius: 3px; font-size: 12px; color: #7f8c8d; }
        .success-rate { font-weight: bold; }
        .success-high { color: #27ae60; }
        .success-medium { color: #f39c12; }
        .success-low { color: #c0392b; }

        .search-container { background-color: {{ style.header_bg_color }}; padding: 15px; border-radius: 5px; margin: 20px 0; position: sticky; top: 0; z-index: 100; }
        .search-input { padding: 10px; width: 70%; border: 1px solid #ddd; border-radius: 4px; font-size: 16px; }
        .search-type { padding: 10px; border: 1px solid #ddd; border-radius: 4px; margin-left: 10px; }
        .index-link { display: inline-block; margin-top: 10px; color: {{ style.primary_color }}; text-decoration: none; font-weight: bold; }
        .index-link:hover { text-decoration: underline; }
        #command-count { margin-left: 10px; font-weight: bold; }
        .no-results { padding: 20px; text-align: center; font-style: italic; color: #555; display: none; }

        .quick-nav { position: fixed; top: 100px; right: 20px; background: white; border: 1px solid #ddd; border-radius: 8px; padding: 10px; max-width: 200px; max-height: 400px; overflow-y: auto; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .quick-nav h4 { margin-top: 0; border-bottom: 1px solid #eee; padding-bottom: 5px; }
        .quick-nav ul { list-style: none; padding: 0; margin: 0; }
        .quick-nav a { display: block; padding: 3px 0; text-decoration: none; color: {{ style.primary_color }}; font-size: 13px; overflow: hidden; text-overflow: ellipsis; white-space: nowrap; }
        .quick-nav a:hover { text-decoration: underline; }

        .footer { margin-top: 50px; text-align: center; color: #7f8c8d; border-top: 1px solid #bdc3c7; padding-top: 20px; }
    </style>
</head>
<body>
    <div class="container">
        <h1>{{ style.icon }} {{ style.title }}</h1>
        <p class="radio-info">{{ vendor }} / {{ model }} <span class="mode-label">{{ style.mode_label }}</span></p>

        <div class="search-container">
            <input type="text" id="search-input" class="search-input" placeholder="Search commands...">
            <select id="search-type" class="search-type">
                <option value="all">All Fields</option>
                <option value="command">Command Name</option>
                <option value="hex">HEX Value</option>
                <option value="ascii">ASCII Value</option>
                <option value="category">Category</option>
            </select>
            <span id="command-count">Showing {{ commands|length }} commands</span>
            <br>
            <a href="{{ index_href|url_path }}" class="index-link">&larr; Back to Index</a>
        </div>

        <div class="quick-nav" id="quick-nav">
            <h4>Quick Navigation</h4>
            <ul id="nav-list">
            {% for cmd in commands %}
                <li><a href="#cmd-{{ loop.index0 }}">{{ cmd.command }}</a></li>
            {% endfor %}
            </ul>
        </div>

        <div id="command-list">
        {% for cmd in commands %}
            <div class="command-card" id="cmd-{{ loop.index0 }}" data-command="{{ cmd.command }}" data-hex="{{ cmd.hex_value }}" data-ascii="{{ cmd.ascii_value }}" data-category="{{ cmd.data_category }}">
                <div class="command-header" onclick="toggleCommandDetails(this)">
                    <div class="command-name">{{ cmd.command }}</div>
                    <div class="command-meta">
                        {% if cmd.data_category %}<span class="category">{{ cmd.data_category }}</span>{% endif %}
                        {% if cmd.success_rate %}<span class="success-rate {{ cmd.success_rate|success_rate_class }}">{{ cmd.success_rate }}</span>{% endif %}
                        <span class="timing">{{ cmd.timing_average }}</span>
                        <span class="frequency">{{ cmd.frequency_count }}&times;</span>
                    </div>
                </div>

                <div class="command-body" style="display:none;">
                    <details>
                        <summary>{{ style.command_label }} Details</summary>
                        <div>
                            <p><span class="field-label">Description:</span> <span class="description">{{ cmd.description }}</span></p>
                            <p><span class="field-label">HEX:</span> <span class="hex">{{ cmd.hex_value }}</span></p>
                            <p><span class="field-label">ASCII:</span> <span class="ascii">{{ cmd.ascii_value }}</span></p>
                        </div>
                    </details>

                    <details>
                        <summary>{{ style.response_label }}</summary>
                        <div class="response-container">
                            <p><strong>{{ cmd.response_type }}</strong></p>
                            <p><span class="field-label">HEX:</span> <span class="hex">{{ cmd.response_hex }}</span></p>
                            <p><span class="field-label">ASCII:</span> <span class="ascii">{{ cmd.response_ascii }}</span></p>
                        </div>
                    </details>

                    <details>
                        <summary>Performance Metrics</summary>
                        <p><span class="field-label">Average Time:</span> <span class="timing">{{ cmd.timing_average }}</span></p>
                        <p><span class="field-label">Usage Count:</span> <span class="frequency">{{ cmd.frequency_count }} times</span></p>
                        {% if cmd.success_rate %}
                        <p><span class="field-label">Success Rate:</span> <span class="success-rate {{ cmd.success_rate|success_rate_class }}">{{ cmd.success_rate }}</span></p>
                        {% endif %}
                    </details>
                </div>
            </div>
        {% endfor %}

            <div class="no-results" id="no-results">
                No commands match your search.
            </div>
        </div>

        <div class="footer">
            <p>Generated by pulitzer | {{ style.title }} | {{ vendor }} {{ model }} | Generated: {{ generated_at }}</p>
        </div>
    </div>

    <script>
        function toggleCommandDetails(header) {
            const body = header.nextElementSibling;
            body.style.display = body.style.display === 'none' ? 'block' : 'none';
        }

        const searchInput = document.getElementById('search-input');
        const searchType = document.getElementById('search-type');
        const commandCount = document.getElementById('command-count');
        const noResults = document.getElementById('no-results');
        const totalCommands = {{ commands|length }};

        function fieldMatches(value, term) {
            return (value || '').toLowerCase().includes(term);
        }

        function performSearch() {
            const term = searchInput.value.toLowerCase();
            const field = searchType.value;
            let visibleCount = 0;

            document.querySelectorAll('.command-card').forEach(card => {
                const data = card.dataset;
                let match;
                if (term === '') {
                    match = true;
                } else if (field === 'all') {
                    match = fieldMatches(data.command, term) ||
                            fieldMatches(data.hex, term) ||
                            fieldMatches(data.ascii, term) ||
                            fieldMatches(data.category, term);
                } else {
                    match = fieldMatches(data[field], term);
                }
                card.style.display = match ? 'block' : 'none';
                if (match) visibleCount++;
            });

            commandCount.textContent = 'Showing ' + visibleCount + ' of ' + totalCommands + ' commands';
            noResults.style.display = visibleCount === 0 ? 'block' : 'none';
            updateQuickNav();
        }

        function updateQuickNav() {
            const navList = document.getElementById('nav-list');
            navList.innerHTML = '';
            document.querySelectorAll('.command-card').forEach(card => {
                if (card.style.display === 'none') return;
                const li = document.createElement('li');
                const a = document.createElement('a');
                a.href = '#' + card.id;
                a.textContent = card.querySelector('.command-name').textContent;
                li.appendChild(a);
                navList.appendChild(li);
            });
        }

        searchInput.addEventListener('input', performSearch);
        searchType.addEventListener('change', performSearch);

        document.addEventListener('DOMContentLoaded', function() {
            const first = document.querySelector('.command-card .command-header');
            if (first) {
                first.nextElementSibling.style.display = 'block';
            }
        });
    </script>
</body>
</html>
"""


def create_environment() -> Environment:
    """Jinja2 environment holding both templates, with autoescaping on."""
    env = Environment(
        loader=DictLoader({
            "index.html": INDEX_TEMPLATE,
            "api_doc.html": API_DOC_TEMPLATE,
        }),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["file_size"] = format_file_size
    env.filters["timestamp"] = format_time
    env.filters["success_rate_class"] = success_rate_class
    env.filters["url_path"] = url_path
    return env


_ENV = None


def get_environment() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = create_environment()
    return _ENV


def render_template(name: str, **context) -> str:
    return get_environment().get_template(name).render(**context)
