"""Tests for the location module."""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

import noortime.location as loc_mod
from noortime.location import (
    DEFAULT_LOCATION,
    Coordinate,
    clear_manual_location,
    get_location,
    load_manual_location,
    resolve_location,
    save_manual_location,
)


class TestGetLocation(unittest.TestCase):
    @patch("noortime.location.requests.get")
    def test_returns_location_on_success(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.json.return_value = {
            "status": "success",
            "city": "Jakarta",
            "countryCode": "ID",
            "lat": -6.2,
            "lon": 106.8,
            "timezone": "Asia/Jakarta",
        }
        mock_resp.raise_for_status = MagicMock()
        mock_get.return_value = mock_resp

        loc = get_location()
        self.assertEqual(loc.name, "Jakarta, ID")
        self.assertAlmostEqual(loc.latitude, -6.2)
        self.assertAlmostEqual(loc.longitude, 106.8)
        self.assertEqual(loc.timezone, "Asia/Jakarta")

    @patch("noortime.location.requests.get")
    def test_falls_back_on_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Network error")
        self.assertEqual(get_location(), DEFAULT_LOCATION)

    @patch("noortime.location.requests.get")
    def test_falls_back_on_api_error_status(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"status": "fail", "message": "reserved range"}
        mock_resp.raise_for_status = MagicMock()
        mock_get.return_value = mock_resp

        self.assertEqual(get_location(), DEFAULT_LOCATION)

    def test_default_is_london(self):
        self.assertAlmostEqual(DEFAULT_LOCATION.latitude, 51.5074)
        self.assertAlmostEqual(DEFAULT_LOCATION.longitude, -0.1278)


class TestCoordinate(unittest.TestCase):
    def test_label_prefers_name(self):
        self.assertEqual(Coordinate(1.0, 2.0, name="Somewhere").label, "Somewhere")

    def test_label_falls_back_to_coordinates(self):
        self.assertEqual(Coordinate(21.4225, 39.8262).label, "21.4225, 39.8262")


class TestManualLocation(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.mkdtemp()
        self._orig_config_dir = loc_mod.CONFIG_DIR
        self._orig_config_file = loc_mod.CONFIG_FILE
        loc_mod.CONFIG_DIR = self._tmpdir
        loc_mod.CONFIG_FILE = os.path.join(self._tmpdir, "location.json")

    def tearDown(self):
        loc_mod.CONFIG_DIR = self._orig_config_dir
        loc_mod.CONFIG_FILE = self._orig_config_file
        shutil.rmtree(self._tmpdir, ignore_errors=True)

    def test_save_and_load_manual_location(self):
        loc = Coordinate(-6.5567, 106.5614, name="Ciseeng, ID", timezone="Asia/Jakarta")
        save_manual_location(loc)
        self.assertEqual(load_manual_location(), loc)

    def test_load_returns_none_when_no_file(self):
        self.assertIsNone(load_manual_location())

    def test_clear_manual_location(self):
        save_manual_location(Coordinate(0.0, 0.0))
        self.assertIsNotNone(load_manual_location())
        clear_manual_location()
        self.assertIsNone(load_manual_location())

    def test_load_returns_none_for_invalid_json(self):
        with open(loc_mod.CONFIG_FILE, "w") as f:
            f.write("not valid json")
        self.assertIsNone(load_manual_location())

    def test_load_returns_none_for_missing_keys(self):
        with open(loc_mod.CONFIG_FILE, "w") as f:
            json.dump({"name": "Test"}, f)
        self.assertIsNone(load_manual_location())

    @patch("noortime.location.get_location")
    def test_resolve_prefers_manual_location(self, mock_get_location):
        loc = Coordinate(33.5, 36.3, name="Damascus")
        save_manual_location(loc)
        self.assertEqual(resolve_location(), loc)
        mock_get_location.assert_not_called()

    @patch("noortime.location.get_location")
    def test_resolve_detects_without_manual_location(self, mock_get_location):
        mock_get_location.return_value = DEFAULT_LOCATION
        self.assertEqual(resolve_location(), DEFAULT_LOCATION)
        mock_get_location.assert_called_once()


if __name__ == "__main__":
    unittest.main()
