"""
Static marketing content served to the site: company details, services,
positions we staff, employer benefits, FAQ and contact inquiry types.
"""

COMPANY_INFO = {
    "name": "Talencor Staffing",
    "tagline": "Our business model adapts to your company's needs",
    "phone": "(647) 946-2177",
    "email": "info@talencor.com",
    "address": {
        "street": "2985 Drew Rd #206",
        "city": "Mississauga",
        "province": "ON",
        "postal": "L4T 0A4",
        "complex": "Airport Business Complex",
    },
    "hours": {
        "weekdays": "Monday - Friday: 10:00 AM - 5:00 PM",
        "saturday": "Saturday: Closed",
        "sunday": "Sunday: Closed",
    },
    "social_media": {
        "linkedin": "https://www.linkedin.com/company/talencor-staffing",
        "twitter": "https://twitter.com/talencor",
        "facebook": "https://www.facebook.com/talencor",
    },
}

SERVICES = [
    {
        "id": "recruiting",
        "title": "Recruiting",
        "description": "Our staffing operations team continuously recruits new talent to join your team, providing the right people the first time",
        "icon": "Users",
    },
    {
        "id": "training",
        "title": "Training",
        "description": "Comprehensive training programs including WHMIS certification and workplace safety training to ensure all employees meet your specific requirements and standards",
        "icon": "GraduationCap",
    },
    {
        "id": "payroll-administration",
        "title": "Payroll & Administration",
        "description": "Complete payroll management including vacation pay, severance, sick leave, and all administrative tasks",
        "icon": "Calculator",
    },
    {
        "id": "labour-relations",
        "title": "Labour & Human Relations",
        "description": "Professional labour relations consulting and management services for your permanent and temporary staff",
        "icon": "Handshake",
    },
    {
        "id": "full-time-placements",
        "title": "Full-time Placements",
        "description": "Permanent staffing solutions with carefully screened candidates who fit your company's unique culture",
        "icon": "Building",
    },
    {
        "id": "consulting",
        "title": "Consulting",
        "description": "Expert workforce management consulting and specialized training services for valued clients",
        "icon": "TrendingUp",
    },
]

STATISTICS = [
    {"value": "5+", "label": "Years of Experience"},
    {"value": "5000+", "label": "Successful Placements"},
    {"value": "500+", "label": "Partner Companies"},
    {"value": "95%", "label": "Client Satisfaction"},
]

INQUIRY_TYPES = [
    "I'm looking for a job",
    "I need to hire talent",
    "General inquiry",
    "Partnership opportunity",
]

JOB_POSITIONS = [
    "Shipper/Receiver",
    "Order Picker",
    "Manufacturer/Light Assembler",
    "Forklift/Material Handler",
    "Food & Beverage Associate",
    "Sorter",
    "Packager",
    "Inventory Associate",
    "Press Operator",
    "Production Welder",
    "G-class Drivers",
    "Clerical/Administration Workers",
]

BENEFITS = [
    {
        "title": "Save Time",
        "description": "We interview and recruit applicants. One phone call is all that is required to supply the right person. We also install our state-of-the-art finger scanner at every job site for time and attendance.",
        "icon": "Clock",
    },
    {
        "title": "Save Money",
        "description": "Pay nothing extra for our employees: no payroll, deductions, incentives, WSIB claims, benefits or severance costs of any kind.",
        "icon": "DollarSign",
    },
    {
        "title": "Flexibility",
        "description": "Adapt to market demands within your specific industry. Qualified workers are a phone call away; able to expand your company's operations with ease.",
        "icon": "Zap",
    },
    {
        "title": "Guaranteed Quality",
        "description": "Each Talencor employee is carefully screened and tested. If one of our employees does not meet your standards we will quickly resolve the issue.",
        "icon": "Shield",
    },
    {
        "title": "Peace of Mind",
        "description": "Our 24/7 employer hotline ensures we continue to provide excellent services. 24 hours a day, 7 days a week we are ready with skilled, talented individuals.",
        "icon": "Heart",
    },
]

FAQS = [
    {
        "question": "What is a staffing agency and how does it work?",
        "answer": "A staffing agency is a professional service that connects qualified job seekers with employers looking to fill temporary, permanent, or contract positions. We handle recruitment, screening, training, and placement of candidates, managing all administrative tasks including payroll and benefits.",
    },
    {
        "question": "How much does it cost to use Talencor Staffing services?",
        "answer": "Our pricing is competitive and transparent. For temporary staffing, we charge a markup on the employee's hourly rate. For permanent placements, we use a success-based fee structure. Contact us for a free consultation and customized quote based on your specific needs.",
    },
    {
        "question": "How quickly can you provide temporary staff?",
        "answer": "We can typically provide qualified temporary staff within 24-48 hours for most positions. Our extensive pool of pre-screened candidates and Profile-Matching System allows us to respond quickly to urgent staffing needs while maintaining quality standards.",
    },
    {
        "question": "What industries does Talencor Staffing serve in Toronto and GTA?",
        "answer": "We specialize in multiple industries including manufacturing, warehouse and logistics, construction, administrative and office, healthcare support, hospitality, technical trades, and general labor. Our team has deep expertise across these sectors.",
    },
    {
        "question": "Do you provide training and certification for employees?",
        "answer": "Yes, we offer comprehensive training programs including free WHMIS certification, workplace safety training, and job-specific skills development. All our placed employees receive training to ensure they meet your specific requirements and industry standards.",
    },
    {
        "question": "What is your candidate screening process?",
        "answer": "Our rigorous screening process includes background checks, skills assessments, reference verification, and interviews. We use our Profile-Matching System to ensure candidates fit both your technical requirements and company culture.",
    },
    {
        "question": "Can temporary employees become permanent?",
        "answer": "Absolutely! We encourage temp-to-perm transitions. 85% of our temporary placements who are offered permanent positions accept and succeed long-term. This allows you to evaluate candidates before making a permanent commitment.",
    },
    {
        "question": "What areas in the GTA do you serve?",
        "answer": "We serve the entire Greater Toronto Area including Toronto, Mississauga, Brampton, Markham, Vaughan, Richmond Hill, Oakville, Burlington, Hamilton, and surrounding areas. Our office is located in Mississauga's Airport Business Complex.",
    },
    {
        "question": "What is WHMIS training and why is it important?",
        "answer": "WHMIS (Workplace Hazardous Materials Information System) is mandatory training for employees who work with or around hazardous materials. It teaches workers to identify hazards, understand safety data sheets, and maintain a safe work environment. We provide free WHMIS certification through our training partner.",
    },
    {
        "question": "How do you ensure payroll compliance and accuracy?",
        "answer": "We handle all payroll processing, tax deductions, CRA remittances, vacation pay, sick leave, and employment standards compliance. Our experienced team ensures accurate, timely payments while maintaining full regulatory compliance.",
    },
]


def get_service(service_id: str) -> dict | None:
    return next((s for s in SERVICES if s["id"] == service_id), None)
