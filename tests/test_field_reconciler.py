from __future__ import annotations

import unittest
from dataclasses import fields
from datetime import date

from app.domain.historic_records import CampaignRecord, ExperimentRecord
from app.mappers.canonical_schemas import CAMPAIGN_FIELDS, EXPERIMENT_FIELDS, fields_for
from app.mappers.field_reconciler import FieldReconciler
from app.parsers.tabular_parser import TabularParser, normalize_header


def _fixed_today() -> date:
    return date(2024, 6, 1)


class TestCanonicalSchemas(unittest.TestCase):
    def test_campaign_fields_cover_every_record_attribute(self) -> None:
        declared = {field_spec.name for field_spec in CAMPAIGN_FIELDS}
        self.assertEqual(declared, {item.name for item in fields(CampaignRecord)})

    def test_experiment_fields_cover_every_record_attribute(self) -> None:
        declared = {field_spec.name for field_spec in EXPERIMENT_FIELDS}
        self.assertEqual(declared, {item.name for item in fields(ExperimentRecord)})

    def test_lookup_keys_are_normalized_and_unique(self) -> None:
        for field_spec in (*CAMPAIGN_FIELDS, *EXPERIMENT_FIELDS):
            keys = field_spec.lookup_keys
            self.assertEqual(len(keys), len(set(keys)), field_spec.name)
            self.assertEqual(keys[0], field_spec.name)
            for key in keys:
                self.assertEqual(normalize_header(key), key)

    def test_unknown_schema_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            fields_for("invoice")
        with self.assertRaises(ValueError):
            FieldReconciler("invoice")


class TestCampaignReconciliation(unittest.TestCase):
    def setUp(self) -> None:
        self.reconciler = FieldReconciler("campaign", today=_fixed_today)
        self.parser = TabularParser()

    def _reconcile(self, text: str) -> list[CampaignRecord]:
        return self.reconciler.reconcile_all(self.parser.parse(text))  # type: ignore[return-value]

    def test_name_and_date_only(self) -> None:
        records = self._reconcile("Name,Date\nAcme,2024-01-01\n")

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.campaign_name, "Acme")
        self.assertEqual(record.campaign_date, "2024-01-01")
        self.assertEqual(record.sessions, 0)
        self.assertEqual(record.primary_conversion_rate, 0.0)
        self.assertEqual(record.total_spend, 0.0)
        self.assertEqual(record.traffic_source, "")

    def test_declared_synonym_order_beats_column_order(self) -> None:
        records = self._reconcile("Visits,Sessions\n900,120\n")
        self.assertEqual(records[0].sessions, 120)

    def test_later_synonym_used_when_earlier_is_empty(self) -> None:
        records = self._reconcile("Visits,Sessions,Campaign Name\n900,,Fall\n")
        self.assertEqual(records[0].sessions, 900)

    def test_same_normalized_header_takes_first_column(self) -> None:
        records = self._reconcile("Sessions,sessions,name\n10,20,X\n")
        self.assertEqual(records[0].sessions, 10)

    def test_row_without_matches_is_all_defaults(self) -> None:
        records = self._reconcile("foo,bar\n1,2\n")

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].campaign_name, "Imported Campaign")
        self.assertEqual(records[0].campaign_date, "2024-06-01")
        self.assertEqual(records[0], CampaignRecord(campaign_date="2024-06-01"))

    def test_full_export_headers(self) -> None:
        text = (
            "Date,Campaign Name,Sessions,Bounce Rate (%),Conversion Rate (%),"
            "Average Time on Page,Total Spend,Cost per Conversion,Traffic Source,Device Type\n"
            "2024-02-01,Winter Push,\"1,500\",42.5%,3.4,2:35,$750,25,google,mobile\n"
        )
        record = self._reconcile(text)[0]

        self.assertEqual(record.campaign_name, "Winter Push")
        self.assertEqual(record.sessions, 1500)
        self.assertEqual(record.bounce_rate, 42.5)
        self.assertEqual(record.primary_conversion_rate, 3.4)
        self.assertEqual(record.avg_time_on_page, 155)
        self.assertEqual(record.total_spend, 750.0)
        self.assertEqual(record.cost_per_conversion, 25.0)
        self.assertEqual(record.traffic_source, "google")
        self.assertEqual(record.device_type, "mobile")

    def test_invalid_numbers_default_to_zero(self) -> None:
        record = self._reconcile("name,sessions,spend\nX,lots,-20\n")[0]
        self.assertEqual(record.sessions, 0)
        self.assertEqual(record.total_spend, 0.0)

    def test_unmatched_headers_are_reported(self) -> None:
        table = self.parser.parse("Campaign Name,Sessions,Mystery Column\nA,1,z\n")
        self.assertEqual(self.reconciler.unmatched_headers(table.headers), ("mystery_column",))

    def test_resolve_sources_lists_precedence(self) -> None:
        sources = self.reconciler.resolve_sources(("visits", "sessions", "name"))
        self.assertEqual(sources["sessions"], ("sessions", "visits"))
        self.assertEqual(sources["campaign_name"], ("name",))
        self.assertEqual(sources["total_spend"], ())


class TestExperimentReconciliation(unittest.TestCase):
    def setUp(self) -> None:
        self.reconciler = FieldReconciler("experiment", today=_fixed_today)
        self.parser = TabularParser()

    def test_experiment_export_headers(self) -> None:
        text = (
            "Experiment Name,Start Date,Sample Size - Control (A),Sample Size - Variant (B),"
            "Uplift (Relative %),Statistical Significance,Winning Variant,Secondary Metrics,p-value\n"
            "Hero CTA,2024-01-10,\"5,000\",4980,-2.5,Significant,Variant B,ctr; bounce rate,0.03\n"
        )
        record = self.reconciler.reconcile_all(self.parser.parse(text))[0]

        self.assertIsInstance(record, ExperimentRecord)
        self.assertEqual(record.experiment_name, "Hero CTA")
        self.assertEqual(record.start_date, "2024-01-10")
        self.assertEqual(record.end_date, "2024-06-01")
        self.assertEqual(record.sample_size_control, 5000)
        self.assertEqual(record.sample_size_variant, 4980)
        self.assertEqual(record.uplift_relative, -2.5)
        self.assertTrue(record.statistical_significance)
        self.assertEqual(record.winning_variant, "Variant B")
        self.assertEqual(record.secondary_metrics, ("ctr", "bounce rate"))
        self.assertAlmostEqual(record.p_value, 0.03)

    def test_missing_name_uses_default(self) -> None:
        record = self.reconciler.reconcile({"hypothesis": "Shorter forms convert"})
        self.assertEqual(record.experiment_name, "Imported Experiment")
        self.assertFalse(record.statistical_significance)


if __name__ == "__main__":
    unittest.main()
