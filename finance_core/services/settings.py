"""Per-tenant finance settings."""

from datetime import date

from finance_core.models.inventory import ValuationMethod
from finance_core.models.tenant import TenantSettings, TenantSettingsUpdate
from finance_core.services.base import TenantDatasetService
from finance_core.services.inventory import restate_lots_at_average


class SettingsService(TenantDatasetService):
    """Reads and updates a tenant's valuation method and default currency."""

    def get_settings(self, tenant_id: str) -> TenantSettings:
        return self._load(tenant_id).settings

    def update_settings(self, tenant_id: str, update: TenantSettingsUpdate) -> TenantSettings:
        """
        Apply the fields present in ``update``.

        Changing the valuation method only affects later movements, with one
        exception: leaving AVG for FIFO or LIFO restates each item's lots as
        a single lot of its on-hand stock at average cost, in the same save.
        """
        data = self._load(tenant_id)
        changes = update.model_dump(exclude_none=True)
        if "default_currency" in changes:
            changes["default_currency"] = changes["default_currency"].upper()

        previous_method = data.settings.valuation_method
        data.settings = data.settings.model_copy(update=changes)

        restated = None
        if (
            previous_method == ValuationMethod.AVG
            and data.settings.valuation_method != ValuationMethod.AVG
        ):
            restated = restate_lots_at_average(data, date.today())

        self._save(data)

        log = self._log(tenant_id)
        log.info(
            "settings_updated",
            **{key: str(getattr(value, "value", value)) for key, value in changes.items()},
        )
        if restated is not None:
            log.info("inventory_lots_restated", items=restated)
        return data.settings
