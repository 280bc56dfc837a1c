"""
adocsite - AsciiDoc to Jekyll page builder

Converts the AsciiDoc sources under a documentation directory into:
1. HTML pages rendered by asciidoctor
2. Jekyll front matter for versioned manual pages
"""

__version__ = "1.0.0"
