import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from kecarajo.logic.shopping.list_builder import ShoppingListGenerator

CATEGORY_TITLES = {
    "verduleria": "Verdulería",
    "carniceria": "Carnicería",
    "almacen": "Almacén",
    "panaderia": "Panadería",
    "lacteos": "Lácteos",
    "limpieza": "Limpieza",
    "otros": "Otros",
}

_TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
])


def generate_pdf_for_shopping_list(lista) -> bytes:
    """One table per category: Producto / Cantidad / Recetas."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)

    styles = getSampleStyleSheet()
    desde = lista.rango_fechas["desde"].strftime("%d/%m/%Y")
    hasta = lista.rango_fechas["hasta"].strftime("%d/%m/%Y")
    elements = [
        Paragraph(f"Lista de compras: {desde} al {hasta}", styles["Title"]),
        Paragraph(f"{lista.total_items} productos", styles["Normal"]),
        Spacer(1, 12),
    ]

    if not lista.items:
        elements.append(Paragraph("No hace falta comprar nada.", styles["Normal"]))

    for categoria, items in lista.por_categoria.items():
        elements.append(Paragraph(CATEGORY_TITLES.get(categoria, categoria), styles["Heading2"]))
        data = [["Producto", "Cantidad", "Recetas"]]
        for item in items:
            data.append([
                item.nombre,
                ShoppingListGenerator.format_cantidad(item.cantidad, item.unidad),
                ", ".join(item.recetas_que_lo_usan),
            ])
        table = Table(data, repeatRows=1, colWidths=[200, 90, 250])
        table.setStyle(_TABLE_STYLE)
        elements.append(table)
        elements.append(Spacer(1, 10))

    doc.build(elements)
    return buf.getvalue()
