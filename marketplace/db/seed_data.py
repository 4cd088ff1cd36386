"""Starter category tree loaded by ``CategoryService.seed``.

Sibling order follows list order. Names are run through the same create
validation as admin input, so they must match the category name pattern.
"""

DEFAULT_CATEGORY_TREE = [
    {
        "name": "Loans",
        "description": "Financial loan services and credit solutions",
        "children": [
            {"name": "Personal Loans", "description": "Personal loan services for individuals"},
            {"name": "Home Loans", "description": "Mortgage and home financing services"},
            {"name": "Vehicle Loans", "description": "Auto and vehicle financing services"},
            {"name": "Business Loans", "description": "Business financing and commercial loans"},
        ],
    },
    {
        "name": "Doctors",
        "description": "Medical professionals and healthcare services",
        "children": [
            {"name": "General Physicians", "description": "General medical practitioners and family doctors"},
            {"name": "Dentists", "description": "Dental care and oral health services"},
            {"name": "Pediatricians", "description": "Healthcare specialists for children"},
            {
                "name": "Specialists",
                "description": "Medical specialists by field of practice",
                "children": [
                    {"name": "Cardiology", "description": "Heart and blood vessel specialists"},
                    {"name": "Neurology", "description": "Brain and nervous system specialists"},
                    {"name": "Dermatology", "description": "Skin, hair and nail specialists"},
                ],
            },
        ],
    },
    {
        "name": "Travel",
        "description": "Travel and tourism services",
        "children": [
            {"name": "Flight Booking", "description": "Airline ticket booking and travel arrangements"},
            {"name": "Hotels & Stays", "description": "Hotel reservations and accommodation services"},
            {"name": "Holiday Packages", "description": "Complete holiday and vacation packages"},
            {"name": "Local Transport & Cabs", "description": "Local transportation and cab services"},
        ],
    },
    {
        "name": "Beauty",
        "description": "Beauty and cosmetic services",
        "children": [
            {"name": "Hair Care", "description": "Hair cutting, styling and treatment services"},
            {"name": "Skin Treatments", "description": "Facial and skin care treatments"},
            {"name": "Makeup & Styling", "description": "Professional makeup and styling services"},
            {"name": "Spa & Wellness", "description": "Spa treatments and wellness services"},
        ],
    },
    {
        "name": "Fitness",
        "description": "Fitness training and gym services",
        "children": [
            {"name": "Gyms", "description": "Fitness centers and gym services"},
            {"name": "Personal Training", "description": "One-on-one fitness training services"},
            {"name": "Yoga & Meditation", "description": "Yoga classes and meditation sessions"},
        ],
    },
    {
        "name": "Repairs & Services",
        "description": "Repair and maintenance services",
        "children": [
            {"name": "Home Appliances Repair", "description": "Household appliance repair services"},
            {"name": "Mobile & Laptop Repair", "description": "Electronic device repair services"},
            {"name": "Plumbing & Electrical", "description": "Plumbing and electrical repair services"},
            {"name": "Car & Bike Services", "description": "Automotive repair and maintenance services"},
        ],
    },
    {
        "name": "Education & Courses",
        "description": "Educational services and learning programs",
        "children": [
            {"name": "Coaching & Tuition", "description": "Personal coaching and tutoring services"},
            {"name": "Language Courses", "description": "Language learning and training programs"},
            {"name": "Professional Certifications", "description": "Professional certification and training programs"},
        ],
    },
    {
        "name": "Home Cleaning",
        "description": "Home cleaning and maintenance services",
        "children": [
            {"name": "Deep Cleaning", "description": "Comprehensive deep cleaning services"},
            {"name": "Carpet & Sofa Cleaning", "description": "Upholstery and carpet cleaning services"},
            {"name": "Pest Control", "description": "Pest control and extermination services"},
            {"name": "Laundry Services", "description": "Laundry and dry cleaning services"},
        ],
    },
    {
        "name": "Events & Entertainment",
        "description": "Event planning and entertainment services",
        "children": [
            {"name": "Party & Wedding Planning", "description": "Event planning and wedding services"},
            {"name": "Catering", "description": "Food and drink catering for events"},
            {"name": "Concerts & Shows", "description": "Concert and live show ticket services"},
        ],
    },
    {
        "name": "Pet Care",
        "description": "Pet care and animal services",
        "children": [
            {"name": "Veterinary Clinics", "description": "Animal healthcare and veterinary services"},
            {"name": "Pet Grooming", "description": "Pet grooming and styling services"},
            {"name": "Pet Training", "description": "Pet training and behavioral services"},
        ],
    },
    {
        "name": "Legal Services",
        "description": "Legal and law services",
        "children": [
            {"name": "Family & Divorce Lawyers", "description": "Family law and divorce legal services"},
            {"name": "Property Lawyers", "description": "Property and real estate legal services"},
            {"name": "Corporate & Business Law", "description": "Business and corporate legal services"},
        ],
    },
]
