"""Tests for roster file validation, parsing and export."""

import sys
import os
import io
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pandas as pd
import pytest

from data.export import EXPORT_COLUMNS, export_roster_excel, roster_to_dataframe
from data.loader import parse_people
from data.sample_data import generate_roster_df, generate_seed_tables
from data.store import InMemoryStore
from data.roster import RosterCache
from data.validator import validate_roster
from engine.occupancy import summarize
from models.assignment import make_assignment, unassign, TableAssignment, SeatAssignment, DeviceAssignment
from models.person import Person


class TestValidateRoster:
    def test_sample_roster_is_valid(self):
        result = validate_roster(generate_roster_df())
        assert result.is_valid
        assert result.errors == []

    def test_missing_name_column(self):
        result = validate_roster(pd.DataFrame({"Email": ["a@example.com"]}))
        assert not result.is_valid
        assert "Nombre" in result.errors[0]

    def test_empty_file(self):
        assert not validate_roster(pd.DataFrame({"Nombre": []})).is_valid

    def test_blank_names(self):
        result = validate_roster(pd.DataFrame({"Nombre": ["Ana", None, "  "]}))
        assert not result.is_valid
        assert "2 rows" in result.errors[0]

    def test_seat_out_of_range(self):
        df = pd.DataFrame({"Nombre": ["Ana"], "Mesa": [1], "Puesto": [6]})
        assert not validate_roster(df).is_valid

    def test_fractional_table(self):
        df = pd.DataFrame({"Nombre": ["Ana"], "Mesa": [1.5], "Puesto": [1]})
        assert not validate_roster(df).is_valid

    def test_duplicate_seat(self):
        df = pd.DataFrame({"Nombre": ["Ana", "Bea"], "Mesa": [1, 1], "Puesto": [2, 2]})
        result = validate_roster(df)
        assert not result.is_valid
        assert "Mesa 1 · Puesto 2" in result.errors[0]

    def test_duplicate_seat_with_inactive_is_allowed(self):
        df = pd.DataFrame({"Nombre": ["Ana", "Bea"], "Mesa": [1, 1], "Puesto": [2, 2], "Activo": ["si", "no"]})
        assert validate_roster(df).is_valid

    def test_duplicate_tablet(self):
        df = pd.DataFrame({"Nombre": ["Ana", "Bea"], "Tablet": ["3", "3"]})
        result = validate_roster(df)
        assert not result.is_valid
        assert "'3'" in result.errors[0]

    def test_warnings(self):
        df = pd.DataFrame({"Nombre": ["Ana"], "Puesto": [2], "Notas": ["x"]})
        result = validate_roster(df)
        assert result.is_valid
        assert len(result.warnings) == 2


class TestParsePeople:
    def test_csv_round_values(self):
        csv = "Nombre,Rol,Mesa,Puesto,Tablet,Activo,CodigoCatador\nAna,presidente,1,1,7,si,12\nBea,,,,,no,\n"
        people = parse_people(pd.read_csv(io.StringIO(csv)))

        ana, bea = people
        assert ana.is_president
        assert (ana.mesa, ana.puesto, ana.tablet) == (1, 1, "7")
        assert ana.codigocatador == 12
        assert ana.pais == "España"
        assert bea.seat_pair is None
        assert bea.tablet is None
        assert not bea.activo
        assert all(p.id == "" for p in people)

    def test_fractional_seat_raises(self):
        with pytest.raises(ValueError):
            parse_people(pd.DataFrame({"Nombre": ["Ana"], "Puesto": [2.5]}))


class TestMakeAssignment:
    def test_numbers(self):
        assert make_assignment("mesa", "3") == TableAssignment(3)
        assert make_assignment("puesto", 4.0) == SeatAssignment(4)
        assert make_assignment("mesa", "") == TableAssignment(None)
        assert make_assignment("puesto", float("nan")) == SeatAssignment(None)

    @pytest.mark.parametrize("raw", ["abc", 2.5, True])
    def test_bad_numbers(self, raw):
        with pytest.raises(ValueError):
            make_assignment("mesa", raw)

    def test_devices(self):
        assert make_assignment("tablet", 7.0) == DeviceAssignment("7")
        assert make_assignment("tablet", " A1 ") == DeviceAssignment("A1")
        assert make_assignment("tablet", "") == DeviceAssignment(None)

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            make_assignment("nombre", "x")

    def test_unassign(self):
        assert unassign("puesto") == SeatAssignment(None)
        assert unassign("tablet").value is None


class TestExport:
    def roster(self):
        return [
            Person(id="a", nombre="Ana", mesa=1, puesto=1, tablet="1", codigocatador=5),
            Person(id="b", nombre="Bea"),
        ]

    def test_dataframe_columns_and_blanks(self):
        df = roster_to_dataframe(self.roster())

        assert list(df.columns) == EXPORT_COLUMNS
        assert df.loc[0, "Mesa"] == 1
        assert pd.isna(df.loc[1, "Mesa"])
        assert df.loc[1, "Tablet"] == ""

    def test_excel_bytes_readable(self):
        data = export_roster_excel(self.roster())
        df = pd.read_excel(io.BytesIO(data), sheet_name="Usuarios", engine="openpyxl")
        assert df["Nombre"].tolist() == ["Ana", "Bea"]

    def test_export_then_validate(self):
        # Exported rosters can be re-imported
        assert validate_roster(roster_to_dataframe(self.roster())).is_valid


class TestSampleData:
    def test_seed_gives_complete_partial_and_empty_tables(self):
        store = InMemoryStore(generate_seed_tables())
        roster = RosterCache(store).refresh()
        summary = summarize(roster, 5)

        assert summary.complete_count == 3
        assert summary.partial_count == 1
        assert summary.empty_count == 1
