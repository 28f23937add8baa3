"""Compiled-in record sets served when a dataset source cannot be read."""
from __future__ import annotations

from typing import Any, Dict, List

_ELECTRICITY_RATES = ("dayUnitRate", "nightUnitRate", "eveningUnitRate")


def _site(
    number: int,
    name: str,
    address: str,
    utility: str,
    mpan: str,
    start: str,
    end: str,
    rates: tuple,
    standing: str,
    mop: str | None,
    dc_da: str | None,
    kva: str | None,
    eac: int,
    status: str,
    supplier: str,
) -> Dict[str, Any]:
    stamp = f"{start}T00:00:00Z"
    record: Dict[str, Any] = {
        "id": f"site-{number}",
        "userId": "user-1",
        "siteName": name,
        "siteAddress": address,
        "utilityType": utility,
        "mpanMprnSpid": mpan,
        "accountId": f"ACC{number:03d}",
        "contractStartDate": start,
        "contractEndDate": end,
        "standingCharges": standing,
        "mopCharges": mop,
        "dcDaCharges": dc_da,
        "kvaCharges": kva,
        "eac": eac,
        "status": status,
        "supplier": supplier,
        "createdAt": stamp,
        "updatedAt": stamp,
    }
    record.update(zip(_ELECTRICITY_RATES, rates))
    return record


SITES: List[Dict[str, Any]] = [
    _site(1, "Main Office Building", "123 Business Park, London, SW1A 1AA", "electricity",
          "2000012345678901", "2024-01-01", "2025-12-31", ("15.25", "8.45", "12.80"),
          "28.50", "45.00", "25.00", "15.00", 125000, "registered", "British Gas"),
    _site(2, "Warehouse Facility", "456 Industrial Estate, Manchester, M1 2AB", "electricity",
          "2000098765432109", "2024-02-15", "2026-02-14", ("14.80", "7.95", "12.30"),
          "26.75", "42.50", "23.75", "18.50", 285000, "registered", "EON Energy"),
    _site(3, "Retail Store Central", "789 High Street, Birmingham, B1 3CD", "electricity",
          "2000156789012345", "2024-03-01", "2025-02-28", ("16.45", "9.20", "13.60"),
          "31.20", "48.00", "28.50", "12.00", 95000, "pending", "SSE Energy"),
    _site(4, "Manufacturing Plant", "321 Factory Lane, Leeds, LS1 4EF", "gas",
          "1023456789012345", "2024-01-15", "2025-01-14", ("4.85",),
          "15.60", "25.00", "18.75", None, 450000, "registered", "Centrica"),
    _site(5, "Branch Office North", "654 Business Centre, Newcastle, NE1 5GH", "gas",
          "1098765432109876", "2024-04-01", "2025-03-31", ("5.25",),
          "17.85", "28.50", "21.25", None, 125000, "objected", "Shell Energy"),
    _site(6, "Head Office Water", "987 Corporate Plaza, Glasgow, G1 6IJ", "water",
          "3012345678901234", "2024-02-01", "2025-01-31", ("2.45",),
          "8.95", None, None, None, 25000, "registered", "Thames Water"),
    _site(7, "Distribution Center", "147 Logistics Hub, Cardiff, CF1 7KL", "electricity",
          "2000147258369014", "2024-05-01", "2025-04-30", ("15.75", "8.65", "13.15"),
          "29.80", "46.25", "26.75", "22.00", 385000, "registered", "Octopus Energy"),
    _site(8, "Research Facility", "258 Innovation Park, Edinburgh, EH1 8MN", "gas",
          "1036925814703692", "2024-03-15", "2025-03-14", ("4.95",),
          "16.45", "26.75", "19.50", None, 275000, "pending", "E.ON Next"),
    _site(9, "Training Center", "369 Education Boulevard, Bristol, BS1 9OP", "water",
          "3025814703692581", "2024-01-01", "2024-12-31", ("2.65",),
          "9.45", None, None, None, 18500, "registered", "Severn Trent"),
    _site(10, "Service Depot", "741 Maintenance Way, Liverpool, L1 0QR", "electricity",
          "2000741852963074", "2024-06-01", "2025-05-31", ("14.95", "8.15", "12.55"),
          "27.95", "44.00", "24.50", "16.75", 165000, "objected", "EDF Energy"),
]

BILLS: List[Dict[str, Any]] = [
    {
        "id": "bill-1",
        "siteId": "site-1",
        "mpanMprnSpid": "2000012345678901",
        "generationDate": "2024-07-02",
        "billRefNo": "2507000836",
        "type": "bill",
        "fromDate": "2024-06-01",
        "toDate": "2024-06-30",
        "dueDate": "2024-07-08",
        "amount": 86.07,
        "vatPercentage": 5.0,
        "status": "paid",
        "validationStatus": "validated",
        "billFilePath": "/bills/2507000836.pdf",
    },
    {
        "id": "bill-2",
        "siteId": "site-2",
        "mpanMprnSpid": "2000098765432109",
        "generationDate": "2024-05-21",
        "billRefNo": "2505001074",
        "type": "bill",
        "fromDate": "2024-04-20",
        "toDate": "2024-05-19",
        "dueDate": "2024-06-04",
        "amount": 593.70,
        "vatPercentage": 20.0,
        "status": "paid",
        "validationStatus": "validated",
        "billFilePath": "/bills/2505001074.pdf",
    },
    {
        "id": "bill-3",
        "siteId": "site-7",
        "mpanMprnSpid": "2000147258369014",
        "generationDate": "2024-07-02",
        "billRefNo": "2507000279",
        "type": "bill",
        "fromDate": "2024-06-01",
        "toDate": "2024-06-30",
        "dueDate": "2024-07-08",
        "amount": 2262.83,
        "vatPercentage": 20.0,
        "status": "paid",
        "validationStatus": "validated",
        "billFilePath": "/bills/2507000279.pdf",
    },
]

METER_READINGS: List[Dict[str, Any]] = [
    {
        "id": "reading-1",
        "siteId": "site-1",
        "mpanMprnSpid": "2000012345678901",
        "utilityType": "electricity",
        "readingDate": "2024-07-31",
        "readingType": "actual",
        "previousReading": 45267,
        "currentReading": 47892,
        "consumption": 2625,
        "readingSource": "smart_meter",
        "meterSerial": "SM001-2345",
        "filePath": "/meter-readings/2000012345678901_202407.pdf",
    },
    {
        "id": "reading-2",
        "siteId": "site-2",
        "mpanMprnSpid": "2000098765432109",
        "utilityType": "electricity",
        "readingDate": "2024-07-31",
        "readingType": "actual",
        "previousReading": 128456,
        "currentReading": 135670,
        "consumption": 7214,
        "readingSource": "manual",
        "meterSerial": "EM002-6789",
        "filePath": "/meter-readings/2000098765432109_202407.pdf",
    },
    {
        "id": "reading-3",
        "siteId": "site-4",
        "mpanMprnSpid": "1023456789012345",
        "utilityType": "gas",
        "readingDate": "2024-07-31",
        "readingType": "estimated",
        "previousReading": 89234,
        "currentReading": 94567,
        "consumption": 5333,
        "readingSource": "estimated",
        "meterSerial": "GM003-4567",
    },
]

CARBON_REPORTS: List[Dict[str, Any]] = [
    {
        "id": "carbon-1",
        "userId": "user-1",
        "reportingPeriod": "2023-Q4",
        "scope1Emissions": 125.4,
        "scope2Emissions": 876.2,
        "scope3Emissions": 234.8,
        "totalEmissions": 1236.4,
        "emissionReduction": 8.5,
        "renewablePercentage": 35.2,
        "carbonOffset": 150.0,
        "reportFilePath": "/carbon-reports/Q4-2023-carbon-report.pdf",
        "verificationStatus": "verified",
    },
    {
        "id": "carbon-2",
        "userId": "user-1",
        "reportingPeriod": "2024-Q1",
        "scope1Emissions": 118.7,
        "scope2Emissions": 798.5,
        "scope3Emissions": 245.3,
        "totalEmissions": 1162.5,
        "emissionReduction": 14.2,
        "renewablePercentage": 42.1,
        "carbonOffset": 175.0,
        "reportFilePath": "/carbon-reports/Q1-2024-carbon-report.pdf",
        "verificationStatus": "verified",
    },
]

FALLBACK_RECORDS: Dict[str, List[Dict[str, Any]]] = {
    "sites": SITES,
    "bills": BILLS,
    "meter_readings": METER_READINGS,
    "carbon_reports": CARBON_REPORTS,
}

__all__ = ["BILLS", "CARBON_REPORTS", "FALLBACK_RECORDS", "METER_READINGS", "SITES"]
