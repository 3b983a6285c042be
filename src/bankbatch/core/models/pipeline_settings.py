"""
PipelineSettings model: deployment constants applied by the pipeline.
"""

from pydantic import BaseModel, ConfigDict, Field


class PipelineSettings(BaseModel):
    """
    Constants the pipeline assigns instead of reading them from source rows.

    Attributes:
        currency: Currency stamped on every record (single-currency batches)
        details_of_charges: Charge bearer code stamped on every record
        max_name_length: Beneficiary name ceiling used when trimming names
        export_title: Leading text of every export file name
    """

    model_config = ConfigDict(frozen=True)

    currency: str = Field("IQD", min_length=1)
    details_of_charges: str = Field("SLEV", min_length=1)
    max_name_length: int = Field(32, gt=0)
    export_title: str = "الشركة العامة لنقل الطاقة الكهربائية"
