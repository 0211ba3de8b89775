"""
Centralized reference data for seed and mock data generation.

This module holds the sampling tables shared by the seed-loader and the mock
transaction generator: Philippine regions and provinces, FMCG categories,
brand catalogs, hourly and day-of-week intensity weights and price ranges.
"""

from typing import Any, Dict, List, Tuple


class ReferenceDataRepository:
    """Repository for all sampling tables used by the generators."""

    # Seed-loader regions (uniformly sampled)
    PHILIPPINE_REGIONS: List[str] = [
        "National Capital Region",
        "Cordillera Administrative Region",
        "Ilocos Region",
        "Cagayan Valley",
        "Central Luzon",
        "Calabarzon",
        "Mimaropa",
        "Bicol Region",
        "Western Visayas",
        "Central Visayas",
        "Eastern Visayas",
        "Zamboanga Peninsula",
        "Northern Mindanao",
        "Davao Region",
        "Soccsksargen",
        "Caraga",
        "Barmm",
    ]

    REGION_PROVINCES: Dict[str, List[str]] = {
        "National Capital Region": ["Metro Manila"],
        "Central Luzon": ["Bulacan", "Nueva Ecija", "Pampanga", "Tarlac", "Zambales"],
        "Calabarzon": ["Batangas", "Cavite", "Laguna", "Quezon", "Rizal"],
        "Western Visayas": ["Aklan", "Antique", "Capiz", "Iloilo", "Negros Occidental"],
        "Central Visayas": ["Bohol", "Cebu", "Negros Oriental", "Siquijor"],
        "Davao Region": ["Davao del Norte", "Davao del Sur", "Davao Oriental"],
    }

    FALLBACK_PROVINCE = "Sample Province"

    FMCG_CATEGORIES: List[str] = [
        "Beverages",
        "Snacks",
        "Personal Care",
        "Household Care",
        "Health & Wellness",
        "Baby Care",
        "Food & Cooking",
        "Dairy Products",
        "Frozen Foods",
        "Bakery",
    ]

    CATEGORY_SUBCATEGORIES: Dict[str, List[str]] = {
        "Beverages": ["Soft Drinks", "Juices", "Coffee", "Bottled Water", "Energy Drinks"],
        "Snacks": ["Chips", "Biscuits", "Candies", "Nuts"],
        "Personal Care": ["Shampoo", "Soap", "Toothpaste", "Lotion"],
        "Household Care": ["Detergent", "Dishwashing", "Cleaners", "Air Fresheners"],
        "Health & Wellness": ["Vitamins", "Pain Relief", "First Aid"],
        "Baby Care": ["Diapers", "Baby Wipes", "Infant Formula"],
        "Food & Cooking": ["Canned Goods", "Noodles", "Condiments", "Rice"],
        "Dairy Products": ["Milk", "Cheese", "Yogurt", "Butter"],
        "Frozen Foods": ["Hotdogs", "Nuggets", "Ice Cream"],
        "Bakery": ["Bread", "Pastries", "Cakes"],
    }

    STORE_TYPES: List[str] = ["Grocery", "Convenience", "Supermarket", "Hypermarket", "Sari-sari Store"]
    STORE_SIZES: List[str] = ["Small", "Medium", "Large"]
    PAYMENT_METHODS: List[str] = ["Cash", "GCash", "Credit Card", "Debit Card", "Maya", "Bank Transfer"]
    UNIT_SIZES: List[str] = ["50g", "100g", "250ml", "500ml", "1L", "1kg", "250g"]

    GENDERS: List[str] = ["Male", "Female"]
    AGE_GROUPS: List[str] = ["18-25", "26-35", "36-45", "46-55", "56-65", "65+"]
    INCOME_BRACKETS: List[str] = ["Low", "Middle", "Upper Middle", "High"]
    LOYALTY_TIERS: List[str] = ["Bronze", "Silver", "Gold", "Platinum"]

    BRAND_SUFFIXES: List[str] = ["Corp", "Inc", "Ltd", "Co"]
    BRAND_COUNTRIES: List[str] = ["Philippines", "USA", "Japan", "Singapore", "Malaysia"]

    # Real-world brands are always seeded first
    REAL_BRANDS: List[Dict[str, str]] = [
        {"name": "Coca-Cola", "category": "Beverages", "manufacturer": "The Coca-Cola Company", "country_origin": "USA"},
        {"name": "Pepsi", "category": "Beverages", "manufacturer": "PepsiCo", "country_origin": "USA"},
        {"name": "Nestlé", "category": "Food & Cooking", "manufacturer": "Nestlé S.A.", "country_origin": "Switzerland"},
        {"name": "Unilever", "category": "Personal Care", "manufacturer": "Unilever PLC", "country_origin": "Netherlands"},
        {"name": "Procter & Gamble", "category": "Household Care", "manufacturer": "P&G", "country_origin": "USA"},
        {"name": "San Miguel", "category": "Beverages", "manufacturer": "San Miguel Corporation", "country_origin": "Philippines"},
        {"name": "Jollibee", "category": "Food & Cooking", "manufacturer": "Jollibee Foods Corporation", "country_origin": "Philippines"},
        {"name": "CDO", "category": "Food & Cooking", "manufacturer": "CDO Foodsphere Corporation", "country_origin": "Philippines"},
    ]

    DEVICE_TYPES: List[str] = ["POS Terminal", "Kiosk", "Scanner", "Display"]
    DEVICE_MODELS: List[str] = ["A100", "B200", "C300", "D400"]

    # Repeated entries weight the draw towards healthy devices
    DEVICE_STATUSES: List[str] = ["online", "online", "online", "offline", "maintenance", "error"]
    LOG_LEVELS: List[str] = ["DEBUG", "INFO", "INFO", "WARN", "ERROR", "FATAL"]
    LOG_COMPONENTS: List[str] = ["Scanner", "Display", "Network", "Storage", "CPU"]

    SUBSTITUTION_REASONS: List[str] = ["Out of Stock", "Customer Preference", "Price", "Promotion"]

    BEHAVIOR_REQUEST_TYPES: List[str] = ["product_search", "price_inquiry", "location_query", "recommendation_request"]
    BEHAVIOR_REQUEST_CATEGORIES: List[str] = ["Product Information", "Navigation", "Pricing", "Recommendations"]

    CUSTOMER_REQUEST_TYPES: List[str] = ["Product Request", "Stock Inquiry", "Complaint", "Suggestion"]
    CUSTOMER_REQUEST_STATUSES: List[str] = ["pending", "processing", "fulfilled", "cancelled"]

    # ----- Mock transaction generator tables -----

    CLIENT_BRANDS: List[Dict[str, Any]] = [
        {"name": "Coca-Cola", "category": "Beverages",
         "skus": ["COKE-350ML", "COKE-500ML", "COKE-1L", "COKE-ZERO-350ML", "SPRITE-350ML", "FANTA-350ML"]},
        {"name": "McDonald's", "category": "Food & Beverage",
         "skus": ["MCD-BURGER", "MCD-FRIES", "MCD-NUGGETS", "MCD-SUNDAE", "MCD-COFFEE"]},
        {"name": "Nissan", "category": "Automotive",
         "skus": ["NISSAN-NAVARA", "NISSAN-ALMERA", "NISSAN-TERRA", "NISSAN-XTRAIL"]},
        {"name": "Adidas", "category": "Sportswear",
         "skus": ["ADIDAS-ULTRABOOST", "ADIDAS-STAN-SMITH", "ADIDAS-ORIGINALS-TEE", "ADIDAS-SHORTS"]},
        {"name": "Globe Telecom", "category": "Telecommunications",
         "skus": ["GLOBE-PREPAID-100", "GLOBE-PREPAID-300", "GLOBE-POSTPAID-1599", "GLOBE-WIFI"]},
    ]

    COMPETITOR_BRANDS: List[Dict[str, Any]] = [
        {"name": "Pepsi", "category": "Beverages",
         "skus": ["PEPSI-350ML", "PEPSI-500ML", "PEPSI-1L", "PEPSI-ZERO-350ML", "7UP-350ML", "MIRINDA-350ML"]},
        {"name": "Jollibee", "category": "Food & Beverage",
         "skus": ["JB-CHICKENJOY", "JB-BURGER", "JB-SPAGHETTI", "JB-PEACH-PIE", "JB-COFFEE"]},
        {"name": "Toyota", "category": "Automotive",
         "skus": ["TOYOTA-HILUX", "TOYOTA-VIOS", "TOYOTA-FORTUNER", "TOYOTA-RAV4"]},
        {"name": "Nike", "category": "Sportswear",
         "skus": ["NIKE-AIR-MAX", "NIKE-REACT", "NIKE-DRI-FIT-TEE", "NIKE-SHORTS"]},
        {"name": "Smart Communications", "category": "Telecommunications",
         "skus": ["SMART-PREPAID-100", "SMART-PREPAID-300", "SMART-POSTPAID-1499", "SMART-BRO"]},
        {"name": "San Miguel", "category": "Beverages",
         "skus": ["SMB-PALE-PILSEN", "SMB-LIGHT", "SMB-PREMIUM", "SMB-FLAVORED"]},
        {"name": "Nestle", "category": "Food & Beverage",
         "skus": ["NESCAFE-3IN1", "MAGGI-NOODLES", "MILO-POWDER", "BEAR-BRAND-MILK"]},
        {"name": "Unilever", "category": "Personal Care",
         "skus": ["DOVE-SOAP", "CLEAR-SHAMPOO", "CLOSEUP-TOOTHPASTE", "VASELINE-LOTION"]},
    ]

    # Weights are relative popularity, they need not sum to one
    WEIGHTED_REGIONS: List[Dict[str, Any]] = [
        {"code": "NCR", "name": "National Capital Region", "weight": 0.35,
         "cities": ["Manila", "Quezon City", "Makati", "Pasig", "Taguig", "Mandaluyong", "Pasay", "Caloocan"]},
        {"code": "CAR", "name": "Cordillera Administrative Region", "weight": 0.03,
         "cities": ["Baguio", "Tabuk", "Bangued", "Lagawe", "Bontoc", "Mayoyao"]},
        {"code": "R01", "name": "Ilocos Region", "weight": 0.08,
         "cities": ["Laoag", "Vigan", "San Fernando", "Dagupan", "Alaminos", "Urdaneta"]},
        {"code": "R02", "name": "Cagayan Valley", "weight": 0.05,
         "cities": ["Tuguegarao", "Ilagan", "Santiago", "Cauayan", "Bayombong"]},
        {"code": "R03", "name": "Central Luzon", "weight": 0.12,
         "cities": ["San Fernando", "Angeles", "Olongapo", "Malolos", "Cabanatuan", "Tarlac", "Balanga"]},
        {"code": "R04A", "name": "Calabarzon", "weight": 0.15,
         "cities": ["Calamba", "Santa Rosa", "Antipolo", "Dasmarinas", "Bacoor", "Lucena", "Batangas"]},
        {"code": "R06", "name": "Western Visayas", "weight": 0.08,
         "cities": ["Iloilo", "Bacolod", "Roxas", "Kalibo", "San Jose de Buenavista"]},
        {"code": "R07", "name": "Central Visayas", "weight": 0.09,
         "cities": ["Cebu", "Lapu-Lapu", "Mandaue", "Tagbilaran", "Dumaguete", "Siquijor"]},
        {"code": "R11", "name": "Davao Region", "weight": 0.07,
         "cities": ["Davao", "Tagum", "Panabo", "Digos", "Mati"]},
    ]

    AGE_BRACKETS: List[str] = ["18-24", "25-34", "35-44", "45-54", "55+"]
    INCOME_CLASSES: List[str] = ["A", "B", "C1", "C2", "D", "E"]
    MOCK_STORE_TYPES: List[str] = ["Sari-sari Store", "Convenience Store", "Grocery", "Supermarket", "Hypermarket"]

    # 0-23h, peaks at lunch and dinner
    HOURLY_WEIGHTS: List[float] = [
        0.5, 0.3, 0.2, 0.2, 0.3, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 4.0,
        5.0, 4.5, 4.0, 3.5, 3.0, 4.0, 5.5, 6.0, 4.5, 3.0, 2.0, 1.0,
    ]

    # Sunday = 0 ... Saturday = 6
    DAY_OF_WEEK_WEIGHTS: List[float] = [0.8, 1.0, 1.0, 1.0, 1.0, 1.2, 1.3]

    BASE_PRICES: Dict[str, Tuple[float, float]] = {
        "Beverages": (15, 200),
        "Food & Beverage": (25, 500),
        "Automotive": (800000, 2500000),
        "Sportswear": (1500, 15000),
        "Telecommunications": (100, 2500),
        "Personal Care": (50, 800),
    }
    DEFAULT_PRICE_RANGE: Tuple[float, float] = (20, 300)

    # Checked in order, first matching marker wins
    SIZE_PRICE_MULTIPLIERS: List[Tuple[Tuple[str, ...], float]] = [
        (("1L", "LARGE"), 1.5),
        (("500ML", "MEDIUM"), 1.2),
    ]

    @classmethod
    def get_provinces(cls, region: str) -> List[str]:
        """Get the provinces of a region, falling back to a placeholder."""
        return cls.REGION_PROVINCES.get(region, [cls.FALLBACK_PROVINCE])

    @classmethod
    def get_subcategories(cls, category: str) -> List[str]:
        """Get the subcategories of an FMCG category."""
        return cls.CATEGORY_SUBCATEGORIES.get(category, ["General"])

    @classmethod
    def get_price_range(cls, category: str, sku: str) -> Tuple[float, float]:
        """Get the price range for a category, adjusted by the size marker in the SKU."""
        low, high = cls.BASE_PRICES.get(category, cls.DEFAULT_PRICE_RANGE)
        for markers, multiplier in cls.SIZE_PRICE_MULTIPLIERS:
            if any(marker in sku for marker in markers):
                return low * multiplier, high * multiplier
        return low, high

    @classmethod
    def region_weights(cls) -> List[Tuple[Dict[str, Any], float]]:
        """Get (region, weight) pairs for the weighted sampler."""
        return [(region, region["weight"]) for region in cls.WEIGHTED_REGIONS]

    @classmethod
    def hour_weights(cls) -> List[Tuple[int, float]]:
        """Get (hour, weight) pairs for the weighted sampler."""
        return list(enumerate(cls.HOURLY_WEIGHTS))

    @classmethod
    def list_catalogs(cls) -> Dict[str, Dict[str, str]]:
        """Summarize the available catalogs for listing commands."""
        return {
            "client_brands": {b["name"]: f"{b['category']} ({len(b['skus'])} SKUs)" for b in cls.CLIENT_BRANDS},
            "competitor_brands": {b["name"]: f"{b['category']} ({len(b['skus'])} SKUs)" for b in cls.COMPETITOR_BRANDS},
            "regions": {r["code"]: f"{r['name']} (weight {r['weight']})" for r in cls.WEIGHTED_REGIONS},
        }
