"""
Manufacturer pack assembly.

Renders the selected documents one after the other, in a fixed order, and
zips them. The first failing renderer aborts the whole pack: either every
selected document is in the archive or no archive is returned.

Usage:
    assembler = PackAssembler()
    result = assembler.assemble(inputs, PackSelection())
    # result.archive_name, result.archive (ZIP bytes), result.version
"""

from __future__ import annotations

import io
import zipfile
from datetime import datetime
from typing import List, Optional, assert_never

from config import Config
from core.exceptions import DocumentGenerationError
from models.pack import (
    DocumentType,
    GeneratedDocument,
    LabelConfiguration,
    LabelTemplate,
    PackResult,
    PackSelection,
)
from models.records import PackInputs
from modules.carton_labels import render_carton_labels
from modules.label_layout import render_identification_labels
from modules.order_sheet import render_order_sheet
from modules.packing_list import render_packing_list
from modules.pdf_analyzer import PDFAnalyzer
from services.version_tracker import archive_filename, document_filename, next_version
from logging_config import get_logger, order_context

logger = get_logger(__name__)


def default_label_configuration(inputs: PackInputs) -> LabelConfiguration:
    """
    Labels for the pack when the caller gives no configuration: the quantity
    and stock of the last recorded label run, otherwise one multi-up label.
    """
    readiness = inputs.readiness
    if readiness is None:
        return LabelConfiguration()
    template = LabelTemplate.MULTI_UP
    if readiness.labels_template:
        try:
            template = LabelTemplate.parse(readiness.labels_template)
        except ValueError:
            logger.warning(f"Ignoring unknown stored label template {readiness.labels_template!r}")
    quantity = min(readiness.labels_qty or 1, Config.MAX_LABEL_QUANTITY)
    return LabelConfiguration(template=template, quantity=quantity)


class PackAssembler:
    """
    Builds the ZIP archive of a manufacturer pack.

    Attributes:
        carton_labels_per_page: 1 or 2 carton labels per page
    """

    def __init__(self, carton_labels_per_page: Optional[int] = None, analyzer: Optional[PDFAnalyzer] = None):
        self.carton_labels_per_page = carton_labels_per_page or Config.CARTON_LABELS_PER_PAGE
        self.analyzer = analyzer or PDFAnalyzer()

    def assemble(
        self,
        inputs: PackInputs,
        selection: PackSelection,
        label_config: Optional[LabelConfiguration] = None,
        version: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ) -> PackResult:
        """
        Render and archive the selected documents.

        Args:
            inputs: Records of the purchase order
            selection: Documents to include
            label_config: Identification label settings (see default_label_configuration)
            version: Pin the pack version instead of taking previous + 1
            generated_at: Timestamp printed in the documents and on the ZIP entries

        Returns:
            PackResult with the archive and the version used

        Raises:
            DocumentGenerationError: a renderer failed; nothing is returned
        """
        po_number = inputs.purchase_order.display_number
        previous = inputs.readiness.manufacturer_pack_version if inputs.readiness else None
        pack_version = next_version(previous, version)
        generated_at = generated_at or datetime.now()
        label_config = label_config or default_label_configuration(inputs)

        with order_context(po_number):
            logger.info(
                f"Assembling manufacturer pack v{pack_version}: "
                f"{', '.join(doc.value for doc in selection.selected()) or 'no documents'}"
            )
            documents: List[GeneratedDocument] = []
            for document_type in selection.selected():
                try:
                    content = self._render(document_type, inputs, label_config, generated_at)
                except Exception as e:
                    logger.error(f"Error generating {document_type.display_name} PDF: {e}")
                    raise DocumentGenerationError(document_type.display_name, e) from e

                document = GeneratedDocument(
                    document_type=document_type,
                    filename=document_filename(document_type, po_number, pack_version),
                    content=content,
                )
                info = self.analyzer.analyze(content, document.filename)
                logger.info(f"{document.filename}: {info['pages']} page(s), {document.size_kb} KB")
                documents.append(document)

            archive = self._zip(documents, generated_at)
            name = archive_filename(po_number, pack_version)
            logger.info(f"{name}: {len(documents)} document(s), {round(len(archive) / 1024, 2)} KB")

        return PackResult(
            archive_name=name,
            archive=archive,
            version=pack_version,
            entries=[doc.filename for doc in documents],
        )

    def _render(
        self,
        document_type: DocumentType,
        inputs: PackInputs,
        label_config: LabelConfiguration,
        generated_at: datetime,
    ) -> bytes:
        match document_type:
            case DocumentType.ORDER_SHEET:
                return render_order_sheet(inputs, generated_at)
            case DocumentType.IDENTIFICATION_LABELS:
                return render_identification_labels(inputs.identifiers, label_config, inputs.project)
            case DocumentType.PACKING_LIST:
                return render_packing_list(inputs, generated_at)
            case DocumentType.CARTON_LABELS:
                return render_carton_labels(inputs, self.carton_labels_per_page, generated_at)
            case _:
                assert_never(document_type)

    @staticmethod
    def _zip(documents: List[GeneratedDocument], generated_at: datetime) -> bytes:
        buffer = io.BytesIO()
        # ZIP timestamps cannot predate 1980
        stamp = max(generated_at.timetuple()[:6], (1980, 1, 1, 0, 0, 0))
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for document in documents:
                entry = zipfile.ZipInfo(document.filename, date_time=stamp)
                entry.compress_type = zipfile.ZIP_DEFLATED
                archive.writestr(entry, document.content)
        return buffer.getvalue()
