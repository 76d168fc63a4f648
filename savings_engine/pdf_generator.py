import io
import logging

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
from fpdf import FPDF
from fpdf.fonts import FontFace

from savings_engine.rebate_estimator import REBATE_BUCKETS
from savings_engine.translations import translate
from savings_engine.utils import format_currency

pdf_logger = logging.getLogger('pdf_generator')

# --- Helper functions to create consistent PDF sections ---
headings_style = FontFace(emphasis="BOLD", fill_color=(224, 240, 230))
BUCKET_COLORS = {"federal": "#00447C", "provincial": "#0F9D58", "municipal": "#F4B400", "utility": "#00BFFF"}


def _latin1(text):
    # Core PDF fonts are latin-1 only
    return str(text).replace('₂', '2').encode('latin-1', 'replace').decode('latin-1')


def add_subsection_header(pdf, title):
    pdf.set_font('Helvetica', 'B', 12)
    pdf.cell(0, 8, _latin1(title), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)


def write_table_from_df(pdf, df):
    """Renders a pandas DataFrame as a table in the PDF, columns spread evenly."""
    if df.empty:
        pdf.cell(0, 10, "No data available to display in table.", new_x="LMARGIN", new_y="NEXT")
        return

    pdf.set_font('Helvetica', '', 9)
    with pdf.table(text_align="LEFT", line_height=6) as table:
        header = table.row(style=headings_style)
        for col_name in df.columns:
            header.cell(_latin1(col_name))

        for _, row_data in df.iterrows():
            row = table.row()
            for item in row_data:
                row.cell(_latin1(item))
    pdf.set_font('Helvetica', '', 10)


def write_bullet_points(pdf, items_list):
    """Writes a list of strings as bullet points, wrapping long items."""
    pdf.set_font('Helvetica', '', 10)
    indentation = 8
    bullet_indent = 5

    for item in items_list:
        pdf.set_x(pdf.l_margin + bullet_indent)
        pdf.write(5, "- ")
        available_width = pdf.w - pdf.l_margin - pdf.r_margin - indentation - bullet_indent
        pdf.set_x(pdf.l_margin + indentation)
        pdf.multi_cell(available_width, 5, _latin1(item), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)


# --- PDF Class with Header/Footer ---
class PDF(FPDF):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.page_title = ""

    def set_page_title(self, title):
        self.page_title = title

    def header(self):
        if self.page_title:
            self.set_font('Helvetica', 'B', 16)
            self.set_text_color(0, 68, 124)  # Dark blue color
            self.cell(0, 10, _latin1(self.page_title), align='C', new_x="LMARGIN", new_y="NEXT")
            self.set_text_color(0, 0, 0)
        self.ln(8)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, 'Smart Home Savings - Estimate only, not a rebate guarantee', align='L')
        self.set_x((self.w / 2) - 10)
        self.cell(20, 10, f'Page {self.page_no()}', align='C')


def build_breakdown_chart_png(breakdown, language="en"):
    """Bar chart of the four rebate buckets, returned as PNG bytes."""
    labels = [translate(f"bucket.{bucket}", language) for bucket in REBATE_BUCKETS]
    values = [breakdown.get(bucket, 0) for bucket in REBATE_BUCKETS]

    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        ax.bar(labels, values, color=[BUCKET_COLORS[b] for b in REBATE_BUCKETS])
        ax.set_ylabel("Rebate ($)")
        ax.set_title(translate("results.breakdown", language))
        ax.get_yaxis().set_major_formatter(plt.FuncFormatter(lambda x, p: f'${int(x):,}'))
        fig.tight_layout()
        img_buffer = io.BytesIO()
        fig.savefig(img_buffer, format='png', dpi=150)
        return img_buffer.getvalue()
    finally:
        plt.close(fig)


# =============== Page Generation ===============
def create_summary_page(pdf, answers, estimate, language):
    pdf.set_page_title(translate("results.title", language))
    pdf.add_page()

    add_subsection_header(pdf, "Property Overview")
    overview = {
        "Postal Code": answers.get("postalCode", "N/A"),
        "Property Type": answers.get("propertyType", "N/A"),
        "Heating System": answers.get("heatingSystem", "N/A"),
        "Home Age": answers.get("homeAge", "N/A"),
        "Insulation": answers.get("insulationLevel", "N/A"),
    }
    write_table_from_df(pdf, pd.DataFrame(list(overview.items()), columns=["Attribute", "Answer"]))
    pdf.ln(6)

    add_subsection_header(pdf, "Key Metrics")
    with pdf.table(col_widths=(45, 45, 45, 45), text_align="CENTER") as table:
        header = table.row(style=headings_style)
        header.cell(_latin1(translate("results.rebates", language)))
        header.cell(_latin1(translate("results.savings", language)))
        header.cell(_latin1(translate("results.carbon", language)))
        header.cell(_latin1(translate("results.payback", language)))
        row = table.row()
        row.cell(format_currency(estimate["total"]))
        row.cell(format_currency(estimate["annual_savings"]))
        row.cell(f"{estimate['carbon_reduction_tonnes']} {translate('results.tonnes', language)}")
        row.cell(f"{estimate['payback_years']} {translate('results.years', language)}")
    pdf.ln(6)


def create_breakdown_page(pdf, estimate, recommendations, language):
    pdf.set_page_title(translate("results.breakdown", language))
    pdf.add_page()

    try:
        pdf.image(io.BytesIO(build_breakdown_chart_png(estimate["breakdown"], language)), w=170)
    except Exception as e:
        pdf_logger.error(f"Breakdown chart failed: {e}")
        pdf.set_font('Helvetica', 'I', 9)
        pdf.cell(0, 6, "Breakdown chart was not available.", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(5)

    add_subsection_header(pdf, "Incentive Summary Table")
    line_items_df = pd.DataFrame(
        [(item["name"], translate(f"bucket.{item['bucket']}", language), format_currency(item["amount"]))
         for item in estimate["line_items"]],
        columns=["Program", "Level", "Amount"],
    )
    write_table_from_df(pdf, line_items_df)
    pdf.ln(5)

    add_subsection_header(pdf, translate("results.recommendations", language))
    write_bullet_points(pdf, [f"{r['title']}: {r['description']}" for r in recommendations])


# ======= Main PDF Generation Orchestrator =======
def generate_pdf_report(answers, estimate, recommendations, language="en"):
    """Builds the downloadable rebate report and returns the PDF as bytes."""
    pdf = PDF(orientation='P', unit='mm', format='A4')
    pdf.set_auto_page_break(auto=True, margin=15)

    create_summary_page(pdf, answers, estimate, language)
    create_breakdown_page(pdf, estimate, recommendations, language)

    return bytes(pdf.output())
