# reports/views.py

from io import BytesIO

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import HttpResponse, JsonResponse
from django.shortcuts import render, get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_POST
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from finance.aggregation import (
    SortState, group_expenses, percent_of, summarize_project, totals_by_category, totals_by_supplier,
)
from finance.models import Expense
from projects.models import Project
from .summarizer import SummaryUnavailable, summarize_project_expenses

REPORT_TYPES = [
    ('general', 'General Report'),
    ('pending', 'Accounts Payable'),
    ('category', 'Expenses by Category'),
    ('supplier', 'Expenses by Supplier'),
]

SORTABLE_COLUMNS = {
    'pending': [('description', 'Description'), ('supplier', 'Supplier'), ('date', 'Date'), ('amount', 'Amount')],
    'category': [('description', 'Description'), ('supplier', 'Supplier'), ('date', 'Date'), ('amount', 'Amount')],
    'supplier': [('description', 'Description'), ('category', 'Category'), ('date', 'Date'), ('amount', 'Amount')],
}

CATEGORY_LABELS = dict(Expense.CATEGORY_CHOICES)


def get_report_data(request):
    """
    Builds everything one report needs from the query string: the selected
    project, the report type, and the figures for that type. The web page
    and the PDF export both use it.
    """
    report_type = request.GET.get('type', 'general')
    if report_type not in dict(REPORT_TYPES):
        report_type = 'general'

    project = None
    project_id = request.GET.get('project')
    if project_id and project_id.isdigit():
        project = Project.objects.filter(pk=project_id).first()

    sort_state = SortState.from_params(request.GET.get('sort'), request.GET.get('dir'))
    data = {
        'project': project,
        'report_type': report_type,
        'report_title': dict(REPORT_TYPES)[report_type],
        'sort_state': sort_state,
        'columns': [
            {'key': key, 'label': label, 'indicator': sort_state.indicator(key)}
            for key, label in SORTABLE_COLUMNS.get(report_type, [])
        ],
    }
    if project is None:
        return data

    expenses = list(project.expenses.all())
    summary = summarize_project(project, expenses)
    data['summary'] = summary

    if report_type == 'general':
        data['supplier_totals'] = [
            {'supplier': supplier or 'N/A', 'total': total, 'percent': percent_of(total, summary.total_spent)}
            for supplier, total in totals_by_supplier(expenses).items()
        ]
        data['category_totals'] = [
            {'category': CATEGORY_LABELS.get(category, category), 'total': total,
             'percent': percent_of(total, summary.total_spent)}
            for category, total in totals_by_category(expenses).items()
        ]
    elif report_type == 'pending':
        pending = [e for e in expenses if e.status == Expense.PENDING]
        data['expenses'] = sort_state.apply(pending)
        data['pending_total'] = summary.total_pending
    elif report_type == 'category':
        groups = group_expenses(sort_state.apply(expenses), 'category')
        data['groups'] = [(CATEGORY_LABELS.get(key, key), group) for key, group in groups.items()]
    elif report_type == 'supplier':
        groups = group_expenses(sort_state.apply(expenses), 'supplier')
        data['groups'] = [(key or 'N/A', group) for key, group in groups.items()]

    return data


@login_required
def project_report(request):
    context = get_report_data(request)
    context.update({
        'title': 'Project Reports',
        'projects': Project.objects.all(),
        'report_types': REPORT_TYPES,
        'ai_enabled': bool(settings.GEMINI_API_KEY),
        'generated_at': timezone.now(),
    })
    return render(request, 'reports/project_report.html', context)


@login_required
@require_POST
def generate_summary(request, pk):
    project = get_object_or_404(Project, pk=pk)
    try:
        summary = summarize_project_expenses(project, project.expenses.all())
    except SummaryUnavailable as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=503)
    return JsonResponse({'success': True, 'summary': summary})


def add_page_number(canvas, doc):
    page_num = canvas.getPageNumber()
    text = f"Page {page_num}"
    canvas.saveState()
    canvas.setFont('Helvetica', 9)
    canvas.drawString(inch, 0.75 * inch, text)
    canvas.restoreState()


def _money(value):
    return f"{settings.DEFAULT_CURRENCY_SYMBOL}{value:,.2f}"


def _expense_table(expenses, second_column):
    header = ['Description', second_column[1], 'Date', 'Amount']
    rows = [header]
    for expense in expenses:
        if second_column[0] == 'category':
            second = expense.get_category_display()
        else:
            second = expense.supplier or 'N/A'
        rows.append([expense.description, second, expense.date.strftime('%d/%m/%Y'), _money(expense.amount)])

    table = Table(rows, colWidths=[2.6 * inch, 1.8 * inch, 1.1 * inch, 1.4 * inch], repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor("#E0E5F2")),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.HexColor("#2B3674")),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 1, colors.HexColor("#CCCCCC")),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ALIGN', (3, 1), (3, -1), 'RIGHT'),
    ]))
    return table


def _totals_table(rows, styles):
    data = [[Paragraph(label, styles['TotalLabel']), Paragraph(value, styles['TotalValue'])] for label, value in rows]
    return Table(data, colWidths=[2.5 * inch, 2 * inch], hAlign='RIGHT')


@login_required
def export_report_pdf(request):
    data = get_report_data(request)
    project = data['project']
    if project is None:
        return HttpResponse("Select a project to export its report.", status=400)

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, topMargin=0.5 * inch, bottomMargin=inch,
                            leftMargin=0.5 * inch, rightMargin=0.5 * inch)
    story = []

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name='TitleStyle', fontSize=20, fontName='Helvetica-Bold', alignment=TA_RIGHT,
                              textColor=colors.HexColor("#2B3674"), leading=24))
    styles.add(ParagraphStyle(name='CompanyInfo', fontSize=9, fontName='Helvetica', alignment=TA_RIGHT, leading=12))
    styles.add(ParagraphStyle(name='ReportInfo', fontSize=10, fontName='Helvetica', leading=14))
    styles.add(ParagraphStyle(name='SectionTitle', fontSize=12, fontName='Helvetica-Bold', spaceBefore=6, spaceAfter=6))
    styles.add(ParagraphStyle(name='TotalLabel', fontSize=10, fontName='Helvetica-Bold', alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='TotalValue', fontSize=10, fontName='Helvetica-Bold', alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='SignatureStyle', fontSize=10, fontName='Helvetica', alignment=TA_CENTER))

    # --- Header ---
    story.append(Paragraph(f"{data['report_title']}: {project.name}", styles['TitleStyle']))
    story.append(Paragraph(f"<b>{settings.COMPANY_NAME}</b>", styles['CompanyInfo']))
    story.append(Spacer(1, 0.3 * inch))

    report_info_text = (
        f"<b>Client:</b> {project.client} | <b>Status:</b> {project.get_status_display()}<br/>"
        f"<b>Address:</b> {project.address}<br/>"
        f"<b>Report Generated:</b> {timezone.now().strftime('%d %b, %Y %I:%M %p')}"
    )
    story.append(Paragraph(report_info_text, styles['ReportInfo']))
    story.append(Spacer(1, 0.3 * inch))

    summary = data['summary']
    report_type = data['report_type']

    if report_type == 'general':
        story.append(Paragraph("Financial Summary", styles['SectionTitle']))
        story.append(_totals_table([
            ('Total Budget:', _money(summary.total_budget)),
            ('Total Paid:', _money(summary.total_paid)),
            ('Total Pending:', _money(summary.total_pending)),
            ('Remaining Budget:', _money(summary.remaining_budget)),
            ('Total Expenses:', _money(summary.total_spent)),
            ('Budget Used:', f"{summary.progress_percent:.2f}%"),
        ], styles))
        story.append(Spacer(1, 0.3 * inch))

        story.append(Paragraph("Expenses by Supplier", styles['SectionTitle']))
        supplier_rows = [['Supplier', 'Total', 'Share']] + [
            [row['supplier'], _money(row['total']), f"{row['percent']:.1f}%"] for row in data['supplier_totals']
        ]
        supplier_table = Table(supplier_rows, colWidths=[3.5 * inch, 1.8 * inch, 1.2 * inch])
        supplier_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor("#E0E5F2")),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 1, colors.HexColor("#CCCCCC")),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
        ]))
        story.append(supplier_table)

    elif report_type == 'pending':
        story.append(_expense_table(data['expenses'], ('supplier', 'Supplier')))
        story.append(Spacer(1, 0.3 * inch))
        story.append(_totals_table([('Total Payable:', _money(data['pending_total']))], styles))

    else:
        second_column = ('supplier', 'Supplier') if report_type == 'category' else ('category', 'Category')
        for label, group in data['groups']:
            story.append(Paragraph(label, styles['SectionTitle']))
            story.append(_expense_table(group.items, second_column))
            story.append(_totals_table([('Total:', _money(group.total))], styles))
            story.append(Spacer(1, 0.2 * inch))

    # --- Signatures ---
    story.append(Spacer(1, 0.7 * inch))
    signature_data = [
        [Paragraph('--------------------------------<br/>Prepared By', styles['SignatureStyle']),
         Paragraph('--------------------------------<br/>Checked By', styles['SignatureStyle']),
         Paragraph('--------------------------------<br/>Approved By', styles['SignatureStyle'])]
    ]
    story.append(Table(signature_data, colWidths=[2.3 * inch, 2.3 * inch, 2.3 * inch], hAlign='CENTER'))

    doc.build(story, onFirstPage=add_page_number, onLaterPages=add_page_number)

    buffer.seek(0)
    filename = f"{report_type}_report_{project.pk}.pdf"
    response = HttpResponse(buffer, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
