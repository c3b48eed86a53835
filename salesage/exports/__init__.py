"""Exports & presentation: every view of a forecast formats the same result.

- formatting.py: Indian Rupee amounts, rate labels, chart tick text
- writers.py: CSV emitters for the monthly table and summary
- reports.py: Markdown forecast report
- pdf.py: typeset PDF report (fpdf)
- chart.py: chart series and plotly area/bar figures
"""
